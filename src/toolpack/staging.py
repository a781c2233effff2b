"""Staging directory assembly.

The staging directory is the exact tree that ends up in the archive. It is
populated by several independent tasks running concurrently on a thread pool:

    compile       src/**/*.ts         -> <staging>/**/*.js, *.d.ts, *.js.map
    manifest      prepared manifest   -> <staging>/package.json
    readme        README.md           -> <staging>/README.md   (if present)
    assets        src/<pattern>       -> <staging>/<relative path>, one task per pattern

Each task writes disjoint paths, so no locking is needed. Asset matches that
would land on package.json or README.md are skipped.

Failure policy:
    The first failing task fails the build. Tasks not yet started are
    cancelled and a running compiler is terminated. The pool is then joined,
    so nothing is still writing into the staging directory when the error
    reaches the caller and the directory gets removed.
"""

import logging
import shutil
import tempfile
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Iterator, Optional

from .asset_copier import copy_pattern
from .compiler import Compiler, compile_sources
from .config import MANIFEST_FILE_NAME, README_FILE_NAME, PackagingConfig
from .errors import CopyError
from .output import log_detail
from .project import ProjectDescriptor

logger = logging.getLogger(__name__)


@contextmanager
def staging_directory(temp_root: Optional[Path] = None) -> Iterator[Path]:
    """Create a fresh staging directory and remove it on exit.

    Removal is best-effort: errors while deleting are logged, never raised,
    so they cannot mask the error that ended the build.

    Args:
        temp_root: Parent directory (defaults to the system temp dir)
    """
    path = Path(tempfile.mkdtemp(prefix="build-", dir=temp_root))
    logger.debug("Created staging directory %s", path)
    try:
        yield path
    finally:
        remove_tree(path)


def remove_tree(path: Path) -> None:
    shutil.rmtree(path, ignore_errors=True)
    if path.exists():
        logger.warning("Could not fully remove %s", path)


def _copy_file(source: Path, target: Path) -> list[Path]:
    try:
        shutil.copyfile(source, target)
    except OSError as e:
        raise CopyError(source.name, e) from e
    return [target]


class StagingBuilder:
    """Populates a staging directory from a project.

    Args:
        compiler: Compiler used for the sources
        config: Packaging settings (asset patterns, compiler flags, workers)
    """

    def __init__(self, compiler: Compiler, config: PackagingConfig):
        self.compiler = compiler
        self.config = config

    def _tasks(self, project: ProjectDescriptor, prepared_manifest: Path, staging_dir: Path) -> list[tuple[str, Callable[[], Any]]]:
        config = self.config
        tasks: list[tuple[str, Callable[[], Any]]] = [
            (
                "compile",
                lambda: compile_sources(
                    self.compiler,
                    project.source_path,
                    staging_dir,
                    config.compiler_flags,
                    config.source_include,
                    config.source_exclude,
                ),
            ),
            (MANIFEST_FILE_NAME, lambda: _copy_file(prepared_manifest, staging_dir / MANIFEST_FILE_NAME)),
        ]
        reserved = (MANIFEST_FILE_NAME, README_FILE_NAME)
        readme = project.readme_path
        if readme is not None:
            tasks.append((README_FILE_NAME, lambda: _copy_file(readme, staging_dir / README_FILE_NAME)))
        for pattern in config.asset_patterns:
            # Bind pattern now; the lambda runs later on a worker thread
            tasks.append((pattern, lambda p=pattern: copy_pattern(project.source_path, staging_dir, p, skip=reserved)))
        return tasks

    def build(self, project: ProjectDescriptor, prepared_manifest: Path, staging_dir: Path) -> Path:
        """Populate staging_dir and return it.

        Args:
            project: Project being packaged
            prepared_manifest: Manifest to ship as package.json (possibly stamped)
            staging_dir: Empty directory owned by the caller

        Returns:
            staging_dir, once every task has succeeded

        Raises:
            CompileFailure: The compiler failed
            CopyError: A manifest, readme, or asset copy failed
        """
        tasks = self._tasks(project, prepared_manifest, staging_dir)
        workers = self.config.max_workers or len(tasks)
        first_error: Optional[BaseException] = None

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="staging") as executor:
            futures: dict[Future[Any], str] = {executor.submit(fn): label for label, fn in tasks}
            try:
                done, not_done = wait(futures, return_when=FIRST_EXCEPTION)
            except KeyboardInterrupt:
                self._abort(futures)
                raise

            # Submission order decides which error is reported when several failed
            for future, label in futures.items():
                if future in done and future.exception() is not None:
                    first_error = future.exception()
                    logger.debug("Staging task %s failed: %s", label, first_error)
                    break

            if first_error is not None:
                self._abort(not_done)
            else:
                for label in futures.values():
                    log_detail(f"Staged {label}", verbose_only=True)

        if first_error is not None:
            raise first_error
        return staging_dir

    def _abort(self, pending: Any) -> None:
        for future in pending:
            future.cancel()
        self.compiler.terminate()
