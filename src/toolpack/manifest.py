"""Reading and writing package.json manifests.

Manifests are kept as plain dicts so every key the project defines survives a
read/write cycle in its original order. Only `name` and `version` are
interpreted.
"""

import json
import logging
from pathlib import Path
from typing import Any

from .errors import ManifestReadError, ManifestShapeError

logger = logging.getLogger(__name__)

Manifest = dict[str, Any]


def read_manifest(path: Path) -> Manifest:
    """Load a manifest and check it has a usable name and version.

    Raises:
        ManifestReadError: File missing, unreadable, not JSON, or not an object
        ManifestShapeError: name/version missing or not strings
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ManifestReadError(path, e.strerror or str(e)) from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ManifestReadError(path, f"invalid JSON ({e})") from e

    if not isinstance(data, dict):
        raise ManifestReadError(path, "top-level value is not an object")

    for key in ("name", "version"):
        if key not in data:
            raise ManifestShapeError(path, f"'{key}' is missing")
        if not isinstance(data[key], str):
            raise ManifestShapeError(path, f"'{key}' must be a string")

    return data


def dump_manifest(data: Manifest) -> str:
    """Serialize a manifest: tab indentation, original key order, trailing newline."""
    return json.dumps(data, indent="\t", ensure_ascii=False) + "\n"


def write_manifest(path: Path, data: Manifest) -> None:
    path.write_text(dump_manifest(data), encoding="utf-8")


def split_version(path: Path, version: str) -> list[str]:
    """Split a version into [major, minor, rest].

    Everything after the second dot stays in the third element, so
    "1.2.3-beta.1" splits into ["1", "2", "3-beta.1"].

    Raises:
        ManifestShapeError: Fewer than three dot-separated segments
    """
    parts = version.split(".", 2)
    if len(parts) < 3 or not all(parts):
        raise ManifestShapeError(path, f"version '{version}' is not in MAJOR.MINOR.PATCH form")
    return parts


def increment_version(path: Path, major: int = 0, minor: int = 0, patch: int = 1) -> str:
    """Bump the version of the manifest at path in place.

    Each component is offset by the given amount. All three components must
    be integers.

    Returns:
        The new version string

    Raises:
        ManifestReadError: See read_manifest
        ManifestShapeError: Version is not three integer components
    """
    data = read_manifest(path)
    parts = split_version(path, data["version"])
    try:
        numbers = [int(part) for part in parts]
    except ValueError:
        raise ManifestShapeError(path, f"version '{data['version']}' is not numeric") from None

    numbers[0] += major
    numbers[1] += minor
    numbers[2] += patch
    new_version = ".".join(str(n) for n in numbers)

    data["version"] = new_version
    write_manifest(path, data)
    logger.debug("Bumped %s from %s to %s", path, parts, new_version)
    return new_version
