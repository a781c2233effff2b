"""Glob-pattern asset copying.

Each pattern is resolved relative to the source folder and every matching file
is copied to the same relative location under the destination folder:

    copy_pattern(src, out, "*.png")      src/icon.png          -> out/icon.png
    copy_pattern(src, out, "**/*.svg")   src/img/logo/a.svg    -> out/img/logo/a.svg

Patterns are independent of each other, so copy_matching() runs one task per
pattern on a thread pool.
"""

import logging
import shutil
from concurrent.futures import Executor, Future, ThreadPoolExecutor, wait
from pathlib import Path
from typing import Collection, Optional, Sequence

from .errors import CopyError

logger = logging.getLogger(__name__)


def copy_pattern(source_dir: Path, dest_dir: Path, pattern: str, skip: Collection[str] = ()) -> list[Path]:
    """Copy the files under source_dir matching pattern into dest_dir.

    A pattern without matches copies nothing and is not an error. Matches whose
    relative POSIX path is in skip are left out.

    Returns:
        Destination paths of the copied files

    Raises:
        CopyError: Any I/O failure while copying
    """
    copied: list[Path] = []
    try:
        for match in sorted(source_dir.glob(pattern)):
            if not match.is_file():
                continue
            relative = match.relative_to(source_dir)
            if relative.as_posix() in skip:
                logger.debug("Pattern %s skipped reserved path %s", pattern, relative.as_posix())
                continue
            target = dest_dir / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(match, target)
            copied.append(target)
    except OSError as e:
        raise CopyError(pattern, e) from e

    logger.debug("Pattern %s copied %d file(s) into %s", pattern, len(copied), dest_dir)
    return copied


def submit_copies(executor: Executor, source_dir: Path, dest_dir: Path, patterns: Sequence[str]) -> list[Future[list[Path]]]:
    """Schedule one copy_pattern task per pattern on executor."""
    return [executor.submit(copy_pattern, source_dir, dest_dir, pattern) for pattern in patterns]


def copy_matching(
    source_dir: Path,
    dest_dir: Path,
    patterns: Sequence[str],
    executor: Optional[Executor] = None,
) -> list[Path]:
    """Copy files matching any of patterns, one concurrent task per pattern.

    All tasks are allowed to finish before the first failure is raised.

    Args:
        source_dir: Folder the patterns are resolved against
        dest_dir: Destination root
        patterns: Glob patterns such as "*.png" or "**/*.svg"
        executor: Executor to run on (a private thread pool when None)

    Returns:
        Destination paths of all copied files, in pattern order

    Raises:
        CopyError: From the first pattern (in pattern order) that failed
    """
    if executor is None:
        with ThreadPoolExecutor(max_workers=max(1, len(patterns)), thread_name_prefix="copy") as pool:
            futures = submit_copies(pool, source_dir, dest_dir, patterns)
    else:
        futures = submit_copies(executor, source_dir, dest_dir, patterns)
        wait(futures)

    copied: list[Path] = []
    for future in futures:
        copied.extend(future.result())
    return copied
