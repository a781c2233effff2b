"""TypeScript compilation for the staging build.

The compiler is reached through the narrow Compiler protocol so the rest of
the pipeline never spawns processes itself. TscCompiler is the real
implementation; tests substitute a fake that writes files into out_dir.

Compiler output is not captured. It streams straight to the operator's
terminal, which means diagnostics cannot be inspected programmatically; only
the exit status is.
"""

import fnmatch
import logging
import subprocess
import threading
from pathlib import Path
from typing import Optional, Protocol, Sequence, runtime_checkable

from .config import COMPILER_COMMAND, SOURCE_EXCLUDE, SOURCE_INCLUDE
from .errors import CompileFailure
from .subprocess_utils import safe_popen

logger = logging.getLogger(__name__)

# Exit status reported when the compiler cannot be started at all
SPAWN_FAILURE_STATUS = 1


@runtime_checkable
class Compiler(Protocol):
    """Protocol for compiling a set of source files into an output folder."""

    def compile(self, files: Sequence[Path], flags: Sequence[str], out_dir: Path) -> int:
        """Compile files into out_dir and return the exit status (0 = success)."""
        ...

    def terminate(self) -> None:
        """Stop a compile running in another thread. No-op if none is running."""
        ...


class TscCompiler:
    """Runs the TypeScript compiler as a child process.

    Args:
        command: Command launching tsc (default: npx tsc)
        cwd: Working directory for the child (npx resolves tsc from here)
    """

    def __init__(self, command: Sequence[str] = COMPILER_COMMAND, cwd: Optional[Path] = None):
        self.command = tuple(command)
        self.cwd = cwd
        self._process: Optional[subprocess.Popen] = None
        self._terminated = False
        self._lock = threading.Lock()

    def compile(self, files: Sequence[Path], flags: Sequence[str], out_dir: Path) -> int:
        cmd = [*self.command, *flags, "--outDir", str(out_dir), *(str(f) for f in files)]
        with self._lock:
            if self._terminated:
                return SPAWN_FAILURE_STATUS
            try:
                self._process = safe_popen(cmd, cwd=self.cwd)
            except OSError as e:
                logger.error("Could not start compiler %s: %s", self.command[0], e)
                return SPAWN_FAILURE_STATUS
            process = self._process

        try:
            return process.wait()
        finally:
            with self._lock:
                self._process = None

    def terminate(self) -> None:
        with self._lock:
            self._terminated = True
            if self._process is not None and self._process.poll() is None:
                logger.debug("Terminating compiler (pid %d)", self._process.pid)
                self._process.terminate()


def is_excluded(relative: str, exclude: Sequence[str]) -> bool:
    """Check a POSIX path relative to the source folder against exclude globs.

    "*.test.*"-style globs match on the file name; globs containing a "/"
    match the whole relative path. "**/test/**" also matches a top-level
    test/ folder.
    """
    name = relative.rsplit("/", 1)[-1]
    for pattern in exclude:
        if "/" not in pattern:
            if fnmatch.fnmatch(name, pattern):
                return True
        elif fnmatch.fnmatch(relative, pattern) or fnmatch.fnmatch(f"./{relative}", pattern):
            return True
    return False


def collect_sources(
    source_dir: Path,
    include: str = SOURCE_INCLUDE,
    exclude: Sequence[str] = SOURCE_EXCLUDE,
) -> list[Path]:
    """Enumerate compilable sources under source_dir, test files excluded.

    Returns:
        Sorted list of source files
    """
    files = []
    for path in source_dir.glob(include):
        if not path.is_file():
            continue
        if is_excluded(path.relative_to(source_dir).as_posix(), exclude):
            continue
        files.append(path)
    return sorted(files)


def compile_sources(
    compiler: Compiler,
    source_dir: Path,
    out_dir: Path,
    flags: Sequence[str],
    include: str = SOURCE_INCLUDE,
    exclude: Sequence[str] = SOURCE_EXCLUDE,
) -> None:
    """Compile every source under source_dir into out_dir.

    Raises:
        CompileFailure: No sources found, or the compiler exited non-zero
    """
    files = collect_sources(source_dir, include, exclude)
    if not files:
        raise CompileFailure(1, f"No sources matching {include} under {source_dir}")

    logger.debug("Compiling %d file(s) from %s", len(files), source_dir)
    status = compiler.compile(files, flags, out_dir)
    if status != 0:
        raise CompileFailure(status)
