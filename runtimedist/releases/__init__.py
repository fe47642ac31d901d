"""
Runtimedist Releases — persisted release rows and their collaborators.

- ``Release`` / ``parse_semver`` — the row and degradation-aware semver
- ``ReleaseReader`` / ``ReleaseWriter`` — storage interfaces, with
  ``MemoryReleaseStore`` and ``FilesystemReleaseStore`` implementations
- ``ReleaseHostingClient`` — interface to the asset host
- ``ReleasePublisher`` — publish-time assembly of a release row
"""

from .core import Release, SemverResult, parse_semver, split_versions
from .store import (
    ReleaseReader,
    ReleaseWriter,
    MemoryReleaseStore,
    FilesystemReleaseStore,
    ReleaseStore,
)
from .hosting import HostedAsset, HostedRelease, ReleaseHostingClient
from .publish import (
    ReleasePublisher,
    collect_artifact_files,
    file_sha256,
    format_release_name,
    generate_release_body,
)

__all__ = [
    "Release",
    "SemverResult",
    "parse_semver",
    "split_versions",
    "ReleaseReader",
    "ReleaseWriter",
    "MemoryReleaseStore",
    "FilesystemReleaseStore",
    "ReleaseStore",
    "HostedAsset",
    "HostedRelease",
    "ReleaseHostingClient",
    "ReleasePublisher",
    "collect_artifact_files",
    "file_sha256",
    "format_release_name",
    "generate_release_body",
]
