"""Zip archive creation for staged builds."""

import logging
import zipfile
from pathlib import Path

from .config import ArchiveNaming
from .errors import ArchiveError

logger = logging.getLogger(__name__)

COMPRESS_LEVEL = 9


def slugify_name(name: str) -> str:
    """Strip any path-like prefix from a package name ("@acme/tool" -> "tool")."""
    return name.rstrip("/").rsplit("/", 1)[-1]


def archive_file_name(name: str, version: str, naming: ArchiveNaming = ArchiveNaming.SLUG) -> str:
    """Build the archive file name for a package.

    Examples:
        archive_file_name("@acme/demo", "1.0.3")                      -> "demo-1_0_3.zip"
        archive_file_name("demo", "1.0.3", ArchiveNaming.PLAIN)       -> "demo-1.0.3.zip"
    """
    if naming is ArchiveNaming.PLAIN:
        return f"{name}-{version}.zip"
    return f"{slugify_name(name)}-{version.replace('.', '_')}.zip"


def archive(staging_dir: Path, publish_dir: Path, archive_name: str) -> Path:
    """Zip the contents of staging_dir into publish_dir/archive_name.

    The children of staging_dir become the top-level entries of the archive.
    An existing archive with the same name is replaced, never appended to.
    The function returns only after the zip file has been closed, so the
    archive is complete on disk.

    A partially written archive is left in place when writing fails.

    Returns:
        Path of the archive

    Raises:
        ArchiveError: Removing the old archive or writing the new one failed
    """
    archive_path = publish_dir / archive_name

    try:
        if archive_path.exists():
            logger.debug("Replacing existing archive %s", archive_path)
            archive_path.unlink()

        entries = sorted(p for p in staging_dir.rglob("*") if p.is_file())
        with zipfile.ZipFile(archive_path, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=COMPRESS_LEVEL) as zf:
            for path in entries:
                zf.write(path, path.relative_to(staging_dir).as_posix())
    except (OSError, zipfile.BadZipFile, zipfile.LargeZipFile) as e:
        raise ArchiveError(archive_path, e) from e

    logger.debug("Wrote %d entries to %s", len(entries), archive_path)
    return archive_path
