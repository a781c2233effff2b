"""Subprocess helpers for launching external tools.

The compiler's output is meant to reach the operator live, so processes
started here inherit the parent's stdout/stderr. Only stdin is detached.
"""

import logging
import subprocess
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

logger = logging.getLogger(__name__)


def get_subprocess_creation_flags() -> int:
    """Get platform-specific subprocess creation flags.

    Returns:
        - Windows: subprocess.CREATE_NEW_PROCESS_GROUP (so terminate() reaches npx's children)
        - Other platforms: 0 (no special flags)
    """
    if sys.platform == "win32":
        return subprocess.CREATE_NEW_PROCESS_GROUP
    return 0


def resolve_command(cmd: Sequence[str]) -> list[str]:
    """Return cmd with Windows batch shims resolved.

    On Windows, `npx` is `npx.cmd` and Popen does not apply PATHEXT, so the
    first element is expanded to its `.cmd` form there.
    """
    args = [str(part) for part in cmd]
    if sys.platform == "win32" and args and not Path(args[0]).suffix:
        args[0] = f"{args[0]}.cmd"
    return args


def safe_popen(cmd: Sequence[str], cwd: Optional[Path] = None, **kwargs: Any) -> subprocess.Popen:
    """Start a process whose stdout/stderr pass straight through to ours.

    Args:
        cmd: Command and arguments
        cwd: Working directory for the child
        **kwargs: Additional arguments passed to subprocess.Popen

    Returns:
        Popen process handle

    Raises:
        OSError: If the executable cannot be started
    """
    default_flags = get_subprocess_creation_flags()

    if "creationflags" in kwargs:
        kwargs["creationflags"] = kwargs["creationflags"] | default_flags
    elif default_flags:
        kwargs["creationflags"] = default_flags

    # Stops the child from competing with us for keyboard input
    if "stdin" not in kwargs:
        kwargs["stdin"] = subprocess.DEVNULL

    args = resolve_command(cmd)
    logger.debug("Spawning: %s", " ".join(args))
    return subprocess.Popen(args, cwd=cwd, **kwargs)
