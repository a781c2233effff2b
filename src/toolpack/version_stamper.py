"""Development revision stamping.

Development builds replace the patch component of the manifest version with a
revision such as "17340512-dev". The revision counts 10-second ticks since
2024-01-01T00:00:00Z, so it grows monotonically without any stored state and
builds started within the same tick share a revision.

The stamped manifest is written to a scratch file; the project's own
package.json is never modified here.
"""

import logging
import os
import tempfile
import time
from pathlib import Path
from typing import Optional

from .manifest import dump_manifest, read_manifest, split_version

logger = logging.getLogger(__name__)

REVISION_TICK_SECONDS = 10
# Tick count at 2024-01-01T00:00:00Z
REVISION_TICK_OFFSET = 170_406_720
REVISION_SUFFIX = "-dev"


def generate_revision(now: Optional[float] = None) -> str:
    """Generate a development revision from the current time.

    Args:
        now: Seconds since the epoch (defaults to time.time())
    """
    if now is None:
        now = time.time()
    ticks = int(now // REVISION_TICK_SECONDS) - REVISION_TICK_OFFSET
    return f"{ticks}{REVISION_SUFFIX}"


def stamp_version(path: Path, version: str, revision: str) -> str:
    """Replace the third component of version with revision."""
    major, minor, _ = split_version(path, version)
    return f"{major}.{minor}.{revision}"


def stamp(manifest_path: Path, revision: Optional[str] = None, temp_dir: Optional[Path] = None) -> Path:
    """Write a copy of the manifest with a revision stamped into its version.

    Args:
        manifest_path: The project's package.json
        revision: Revision to stamp (generated from the clock when None)
        temp_dir: Directory for the scratch file (defaults to the system temp dir)

    Returns:
        Path of the prepared manifest. The caller owns and removes it.

    Raises:
        ManifestReadError: Manifest missing or not a JSON object
        ManifestShapeError: Missing name/version, or version has < 3 segments
    """
    data = read_manifest(manifest_path)
    if revision is None:
        revision = generate_revision()

    data["version"] = stamp_version(manifest_path, data["version"], revision)

    fd, scratch = tempfile.mkstemp(prefix="package-", suffix=".json", dir=temp_dir)
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        f.write(dump_manifest(data))

    logger.debug("Stamped %s@%s into %s", data["name"], data["version"], scratch)
    return Path(scratch)
