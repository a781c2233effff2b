"""Packaging Configuration.

This module defines the fixed layout and build settings used by the pipeline.

Design:
    A PackagingConfig declares everything a packaging run needs to know that
    is not part of the project itself: where the project's pieces live, which
    assets to copy, which sources to compile and with which compiler flags,
    and how the archive is named. Presets exist for each CLI command; callers
    derive variations with dataclasses.replace() instead of mutating anything.
"""

from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Optional

SOURCE_DIR_NAME = "src"
MANIFEST_FILE_NAME = "package.json"
README_FILE_NAME = "README.md"
PUBLISH_DIR_NAME = "publish"

ASSET_PATTERNS: tuple[str, ...] = ("*.png", "*.svg", "*.json")
RECURSIVE_ASSET_PATTERNS: tuple[str, ...] = ("**/*.png", "**/*.svg", "**/*.json")

SOURCE_INCLUDE = "**/*.ts"
SOURCE_EXCLUDE: tuple[str, ...] = ("*.test.*", "*.spec.*", "**/test/**")

COMPILER_COMMAND: tuple[str, ...] = ("npx", "tsc")

# Pinned alongside the compiler version; changing these changes the emitted output.
COMPILER_FLAGS: tuple[str, ...] = (
    "--module",
    "NodeNext",
    "--moduleResolution",
    "NodeNext",
    "--importHelpers",
    "false",
    "--noEmitHelpers",
    "false",
    "--target",
    "es2019",
    "--lib",
    "es2019,es2020,es2022.error",
    "--forceConsistentCasingInFileNames",
    "--noImplicitAny",
    "--noImplicitReturns",
    "--strictNullChecks",
    "--preserveConstEnums",
    "--esModuleInterop",
    "--resolveJsonModule",
    "--declaration",
    "--sourceMap",
    "--skipLibCheck",
)


class ArchiveNaming(Enum):
    """How the archive file name is derived from the manifest."""

    # <basename-of-name>-<version_with_underscores>.zip
    SLUG = "slug"
    # <name>-<version>.zip
    PLAIN = "plain"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PackagingConfig:
    """Settings for one packaging run.

    Attributes:
        stamp_revision: Replace the patch component of the version with a revision
        require_readme: Treat a missing README.md as a precondition failure
        archive_naming: Archive file name scheme
        asset_patterns: Glob patterns (relative to src/) copied into staging
        source_include: Glob selecting compilable sources under src/
        source_exclude: Globs removing test files from the compile set
        compiler_command: Command that launches the compiler
        compiler_flags: Fixed flags passed to the compiler
        bump_version: Increment the original manifest's patch version after packaging
        max_workers: Thread count for concurrent staging tasks (None = one per task)
        temp_root: Parent directory for scratch files (None = system temp)
    """

    stamp_revision: bool
    require_readme: bool
    archive_naming: ArchiveNaming
    asset_patterns: tuple[str, ...] = ASSET_PATTERNS
    source_include: str = SOURCE_INCLUDE
    source_exclude: tuple[str, ...] = SOURCE_EXCLUDE
    compiler_command: tuple[str, ...] = COMPILER_COMMAND
    compiler_flags: tuple[str, ...] = COMPILER_FLAGS
    bump_version: bool = False
    max_workers: Optional[int] = None
    temp_root: Optional[Path] = None

    def with_recursive_assets(self) -> "PackagingConfig":
        """Return a copy that matches the asset patterns at any depth."""
        return replace(self, asset_patterns=RECURSIVE_ASSET_PATTERNS)


# Revisioned variant: stamps a development revision, requires README.md and
# bumps the patch version in package.json once the archive is written.
PACKAGE_TOOL = PackagingConfig(
    stamp_revision=True,
    require_readme=True,
    archive_naming=ArchiveNaming.SLUG,
    bump_version=True,
)

# Earlier variant: packages the manifest version as-is.
BUILD_TOOL = PackagingConfig(
    stamp_revision=False,
    require_readme=False,
    archive_naming=ArchiveNaming.PLAIN,
)
