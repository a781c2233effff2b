"""Project layout.

A packageable project is a folder with a fixed shape:

    <root>/
        src/            compiled sources and static assets
        package.json    manifest (name, version, ...)
        README.md       optional readme, copied next to the manifest
        publish/        created on demand, receives the archives
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .config import MANIFEST_FILE_NAME, PUBLISH_DIR_NAME, README_FILE_NAME, SOURCE_DIR_NAME
from .errors import PreconditionError


@dataclass(frozen=True)
class ProjectDescriptor:
    """Paths of one project, derived from its root.

    Attributes:
        root_path: Project folder
        source_path: Source tree (src/)
        manifest_path: Manifest file (package.json)
        readme_path: Readme file (README.md), None if the project has none
        publish_path: Output folder for archives (publish/)
    """

    root_path: Path
    source_path: Path
    manifest_path: Path
    readme_path: Optional[Path]
    publish_path: Path

    @classmethod
    def from_root(cls, root: Path, cwd: Path) -> "ProjectDescriptor":
        """Derive the project paths from a root folder.

        Args:
            root: Project folder, absolute or relative to cwd
            cwd: Directory relative roots are resolved against

        Returns:
            ProjectDescriptor; readme_path is None when README.md is absent
        """
        root_path = root if root.is_absolute() else cwd / root
        readme_path = root_path / README_FILE_NAME
        return cls(
            root_path=root_path,
            source_path=root_path / SOURCE_DIR_NAME,
            manifest_path=root_path / MANIFEST_FILE_NAME,
            readme_path=readme_path if readme_path.is_file() else None,
            publish_path=root_path / PUBLISH_DIR_NAME,
        )

    def validate(self, require_readme: bool) -> None:
        """Check that every required path exists.

        Checked in order: project folder, source folder, manifest, readme.
        Nothing on disk is touched.

        Raises:
            PreconditionError: Naming the first missing path
        """
        if not self.root_path.is_dir():
            raise PreconditionError("Project folder", self.root_path)
        if not self.source_path.is_dir():
            raise PreconditionError("Source folder", self.source_path)
        if not self.manifest_path.is_file():
            raise PreconditionError("Package file", self.manifest_path)
        if require_readme and self.readme_path is None:
            raise PreconditionError("Readme file", self.root_path / README_FILE_NAME)
