"""Exception taxonomy for the packaging pipeline.

Every failure the pipeline can surface derives from PackagingError and carries
the process exit code the CLI should use. Library code only raises; turning
errors into exit codes and operator messages is the CLI's job.
"""

from pathlib import Path
from typing import Optional


class PackagingError(Exception):
    """Base class for all packaging failures."""

    exit_code: int = 1


class PreconditionError(PackagingError):
    """A required project path does not exist."""

    def __init__(self, description: str, path: Path):
        self.description = description
        self.path = path
        super().__init__(f"{description} does not exist: {path}")


class ManifestReadError(PackagingError):
    """The manifest is missing, unreadable, or not a JSON object."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read manifest {path}: {reason}")


class ManifestShapeError(PackagingError):
    """The manifest is valid JSON but lacks a usable name or version."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid manifest {path}: {reason}")


class CopyError(PackagingError):
    """Copying the files matched by a pattern failed."""

    def __init__(self, pattern: str, cause: BaseException):
        self.pattern = pattern
        self.cause = cause
        super().__init__(f"Failed to copy files matching '{pattern}': {cause}")


class CompileFailure(PackagingError):
    """The compiler could not be spawned or exited non-zero.

    A positive exit code is kept so the CLI can exit with it; signals and
    spawn failures become 1.
    """

    def __init__(self, exit_code: int, message: Optional[str] = None):
        self.exit_code = exit_code if exit_code > 0 else 1
        super().__init__(message or f"Compiler exited with status {exit_code}")


class ArchiveError(PackagingError):
    """Writing the archive failed. Partial archives are left in place."""

    def __init__(self, archive_path: Path, cause: BaseException):
        self.archive_path = archive_path
        self.cause = cause
        super().__init__(f"Failed to write archive {archive_path}: {cause}")
