"""Packaging pipeline.

Sequences one packaging run, each step gated on the previous one:

    1. Validate       project folder, src/, package.json (and README.md if required)
    2. Manifest       stamp a revision into a scratch copy, or use package.json as-is
    3. Publish dir    create <root>/publish if missing
    4. Stage          compile + copy manifest, readme, and assets concurrently
    5. Archive        zip the staging directory into publish/
    6. Clean up       remove the staging directory (also on failure)

Nothing on disk is modified before step 1 succeeds. Errors propagate as
PackagingError subclasses; the pipeline never exits the process itself.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .archiver import archive, archive_file_name
from .compiler import Compiler, TscCompiler
from .config import PackagingConfig
from .manifest import increment_version, read_manifest
from .output import TimedLogger, log_detail, log_phase
from .project import ProjectDescriptor
from .staging import StagingBuilder, staging_directory
from .version_stamper import stamp

logger = logging.getLogger(__name__)

TOTAL_STEPS = 6


@dataclass(frozen=True)
class PackageResult:
    """Outcome of a successful packaging run.

    Attributes:
        name: Package name from the manifest
        version: Version shipped in the archive (stamped if a revision was applied)
        archive_path: Path of the written archive
        elapsed: Run time in seconds
        next_version: Version written back to package.json, if it was bumped
    """

    name: str
    version: str
    archive_path: Path
    elapsed: float
    next_version: Optional[str] = None


class PackagePipeline:
    """Packages a project folder into a versioned zip archive.

    Args:
        config: Packaging settings
        cwd: Directory relative project folders are resolved against
        compiler: Compiler to use (defaults to a TscCompiler running in the project folder)
    """

    def __init__(self, config: PackagingConfig, cwd: Path, compiler: Optional[Compiler] = None):
        self.config = config
        self.cwd = cwd
        self.compiler = compiler

    def run(self, folder: Path, revision: Optional[str] = None) -> PackageResult:
        """Package the project in folder.

        Args:
            folder: Project folder
            revision: Revision to stamp; generated when None. Only used when
                the config stamps revisions.

        Raises:
            PreconditionError: A required project path is missing
            ManifestReadError, ManifestShapeError: package.json is unusable
            CompileFailure: The compiler failed
            CopyError: Copying into the staging directory failed
            ArchiveError: Writing the archive failed
        """
        start_time = time.time()
        config = self.config
        project = ProjectDescriptor.from_root(folder, self.cwd)

        with TimedLogger("Validating project", phase=(1, TOTAL_STEPS)) as step:
            project.validate(config.require_readme)
            step.detail(f"Project: {project.root_path}")

        scratch_manifest: Optional[Path] = None
        try:
            with TimedLogger("Preparing manifest", phase=(2, TOTAL_STEPS)) as step:
                if config.stamp_revision:
                    scratch_manifest = stamp(project.manifest_path, revision, config.temp_root)
                    prepared_manifest = scratch_manifest
                else:
                    prepared_manifest = project.manifest_path
                manifest = read_manifest(prepared_manifest)
                name, version = manifest["name"], manifest["version"]
                step.detail(f"Package: {name}@{version}")

            with TimedLogger("Preparing publish folder", phase=(3, TOTAL_STEPS)) as step:
                project.publish_path.mkdir(parents=True, exist_ok=True)
                step.detail(f"Publish: {project.publish_path}", verbose_only=True)

            compiler = self.compiler or TscCompiler(config.compiler_command, cwd=project.root_path)
            builder = StagingBuilder(compiler, config)

            with staging_directory(config.temp_root) as staging_dir:
                with TimedLogger("Building staging directory", phase=(4, TOTAL_STEPS)) as step:
                    step.detail(f"Staging: {staging_dir}", verbose_only=True)
                    builder.build(project, prepared_manifest, staging_dir)

                with TimedLogger("Writing archive", phase=(5, TOTAL_STEPS)) as step:
                    archive_path = archive(
                        staging_dir,
                        project.publish_path,
                        archive_file_name(name, version, config.archive_naming),
                    )
                    step.detail(f"Archive: {archive_path}")

            log_phase(6, TOTAL_STEPS, "Removed staging directory")
        finally:
            if scratch_manifest is not None:
                scratch_manifest.unlink(missing_ok=True)

        next_version = None
        if config.bump_version:
            next_version = increment_version(project.manifest_path)
            log_detail(f"Bumped {project.manifest_path.name} to {next_version}")

        return PackageResult(
            name=name,
            version=version,
            archive_path=archive_path,
            elapsed=time.time() - start_time,
            next_version=next_version,
        )
