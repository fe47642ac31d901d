"""
Runtimedist Artifacts — the per-release artifacts document.

- **Document types** — ``ReleaseArtifacts`` and its platform / common-file
  entries, with a stable JSON round trip
- **Classifier** — ``classify_file`` turns a filename (plus authoritative
  download records) into a kind and platform coordinates
- **Builder** — ``ArtifactsBuilder`` groups uploaded files into a document

Quick start::

    from runtimedist.artifacts import ArtifactsBuilder, DownloadRecord

    record = DownloadRecord(os="linux", arch="x64", version="22.15.0",
                            path="/tmp/node-v22.15.0-linux-x64.tar.xz", size=30023544)
    document = (
        ArtifactsBuilder(records=[record])
        .add("node-v22.15.0-linux-x64.tar.xz", url, sha256="dafe2e…")
        .build()
    )
    raw = document.to_json()
"""

from .core import (
    ArtifactFile,
    AuditArtifact,
    CommonFile,
    PlatformArtifact,
    ArtifactsMetadata,
    ReleaseArtifacts,
    format_timestamp,
    parse_timestamp,
)
from .kinds import (
    DownloadRecord,
    FileClassification,
    FileKind,
    Resolution,
    classify_file,
    extract_version_from_filename,
    kind_from_suffix,
)
from .builder import ArtifactsBuilder, UploadedFile, build_artifacts_document

__all__ = [
    # Document
    "ArtifactFile",
    "AuditArtifact",
    "CommonFile",
    "PlatformArtifact",
    "ArtifactsMetadata",
    "ReleaseArtifacts",
    "format_timestamp",
    "parse_timestamp",
    # Classifier
    "DownloadRecord",
    "FileClassification",
    "FileKind",
    "Resolution",
    "classify_file",
    "extract_version_from_filename",
    "kind_from_suffix",
    # Builder
    "ArtifactsBuilder",
    "UploadedFile",
    "build_artifacts_document",
]
