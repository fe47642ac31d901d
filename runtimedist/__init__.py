"""
Runtimedist - verified runtime binaries, published as a static catalog.

Publish time:
    ArtifactsBuilder / ReleasePublisher assemble the per-release artifacts
    document and record one Release row per publish.

Site generation:
    Generator loads every release, splits aggregated rows per version,
    builds the sorted site model and renders the human pages plus a
    PEP 503-style simple index, writing only files whose content changed.
"""

__version__ = "0.1.0"

from .faults import Fault, FaultDomain, Severity
from .artifacts import (
    ArtifactsBuilder,
    DownloadRecord,
    FileKind,
    ReleaseArtifacts,
    classify_file,
)
from .releases import (
    FilesystemReleaseStore,
    MemoryReleaseStore,
    Release,
    ReleasePublisher,
    parse_semver,
)
from .sitegen import GenerateOptions, GenerateResult, Generator, build_model, load_releases
from .config import ConfigLoader, PublishConfig, SiteGenConfig

__all__ = [
    "__version__",
    "Fault",
    "FaultDomain",
    "Severity",
    "ArtifactsBuilder",
    "DownloadRecord",
    "FileKind",
    "ReleaseArtifacts",
    "classify_file",
    "FilesystemReleaseStore",
    "MemoryReleaseStore",
    "Release",
    "ReleasePublisher",
    "parse_semver",
    "GenerateOptions",
    "GenerateResult",
    "Generator",
    "build_model",
    "load_releases",
    "ConfigLoader",
    "PublishConfig",
    "SiteGenConfig",
]
