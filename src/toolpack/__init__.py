"""toolpack - package TypeScript tools into versioned zip archives."""

__version__ = "0.3.0"

from toolpack.errors import (  # noqa: E402
    ArchiveError,
    CompileFailure,
    CopyError,
    ManifestReadError,
    ManifestShapeError,
    PackagingError,
    PreconditionError,
)
from toolpack.pipeline import PackagePipeline, PackageResult  # noqa: E402

__all__ = [
    "ArchiveError",
    "CompileFailure",
    "CopyError",
    "ManifestReadError",
    "ManifestShapeError",
    "PackagePipeline",
    "PackageResult",
    "PackagingError",
    "PreconditionError",
    "__version__",
]
