"""
Artifact Kinds — classify uploaded filenames.

Resolution order for :func:`classify_file`:

1. checksum marker in the name  → common checksum file
2. exact match with a download record's file name → binary (authoritative)
3. sidecar (``.audit.json`` / ``.sig`` / ``.cert``) of a download record
   → that sidecar kind, with the record's coordinates (authoritative)
4. filename heuristic → OS / architecture / version from name tokens
5. nothing matched → ``unknown``

Classification never raises; it degrades.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Sequence

logger = logging.getLogger("runtimedist.artifacts.kinds")

CHECKSUM_MARKERS = ("SHASUMS", "checksums")
KNOWN_OS_TOKENS = ("linux", "darwin", "win", "windows", "mac")

AUDIT_SUFFIX = ".audit.json"
SIGNATURE_SUFFIX = ".sig"
CERTIFICATE_SUFFIX = ".cert"


# ── Enums ───────────────────────────────────────────────────────────────


class FileKind(str, Enum):
    """Semantic role of an uploaded file."""

    CHECKSUM = "checksum_file"
    CHECKSUM_SIGNATURE = "checksum_signature"
    BINARY = "binary"
    AUDIT = "audit"
    SIGNATURE = "signature"
    CERTIFICATE = "certificate"
    UNKNOWN = "unknown"


class Resolution(str, Enum):
    """How a classification was obtained."""

    COMMON = "common"
    AUTHORITATIVE = "authoritative"
    HEURISTIC = "heuristic"
    UNKNOWN = "unknown"


# ── Value Objects ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class DownloadRecord:
    """
    An authoritative record of a downloaded (and verified) file.

    ``path`` is the local path; only its base name is matched.
    """

    os: str
    arch: str
    version: str
    path: str
    size: int = 0
    checksum_verified: bool = False
    clamav_clean: bool = False
    gpg_verified: bool = False

    @property
    def filename(self) -> str:
        return os.path.basename(self.path)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DownloadRecord":
        return cls(
            os=d.get("os", ""),
            arch=d.get("arch", ""),
            version=d.get("version", ""),
            path=d.get("path", ""),
            size=int(d.get("size", 0) or 0),
            checksum_verified=bool(d.get("checksum_verified", False)),
            clamav_clean=bool(d.get("clamav_clean", False)),
            gpg_verified=bool(d.get("gpg_verified", False)),
        )


@dataclass(frozen=True)
class FileClassification:
    """Result of :func:`classify_file`."""

    filename: str
    kind: FileKind
    resolution: Resolution
    os: str = ""
    arch: str = ""
    version: str = ""
    size: int = 0
    record: Optional[DownloadRecord] = None

    @property
    def is_common(self) -> bool:
        return self.resolution is Resolution.COMMON

    @property
    def degraded(self) -> bool:
        """True when coordinates came from the heuristic or are absent."""
        return self.resolution in (Resolution.HEURISTIC, Resolution.UNKNOWN)

    @property
    def platform(self) -> str:
        return f"{self.os}-{self.arch}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filename": self.filename,
            "kind": self.kind.value,
            "resolution": self.resolution.value,
            "os": self.os,
            "arch": self.arch,
            "version": self.version,
            "size": self.size,
        }


# ── Helpers ─────────────────────────────────────────────────────────────


def kind_from_suffix(filename: str) -> FileKind:
    """Role of a platform file, judged by its suffix alone."""
    if filename.endswith(AUDIT_SUFFIX):
        return FileKind.AUDIT
    if filename.endswith(SIGNATURE_SUFFIX):
        return FileKind.SIGNATURE
    if filename.endswith(CERTIFICATE_SUFFIX):
        return FileKind.CERTIFICATE
    return FileKind.BINARY


def strip_sidecar_suffix(filename: str) -> Optional[str]:
    """``node.tar.xz.sig`` → ``node.tar.xz``; ``None`` for non-sidecars."""
    for suffix in (AUDIT_SUFFIX, SIGNATURE_SUFFIX, CERTIFICATE_SUFFIX):
        if filename.endswith(suffix) and len(filename) > len(suffix):
            return filename[: -len(suffix)]
    return None


def extract_version_from_filename(filename: str) -> str:
    """
    First dash-delimited ``v``-prefixed token, without the ``v``.

    ``node-v22.15.0-linux-x64.tar.xz`` → ``22.15.0``
    """
    for part in filename.split("-"):
        if part.startswith("v") and len(part) > 1:
            return part[1:]
    return ""


def _checksum_kind(filename: str) -> FileKind:
    if filename.endswith((".sig", ".asc")):
        return FileKind.CHECKSUM_SIGNATURE
    return FileKind.CHECKSUM


def _find_record(filename: str, records: Iterable[DownloadRecord]) -> Optional[DownloadRecord]:
    for record in records:
        if record.filename == filename:
            return record
    return None


# ── Classifier ──────────────────────────────────────────────────────────


def classify_file(
    filename: str,
    records: Optional[Sequence[DownloadRecord]] = None,
) -> FileClassification:
    """
    Determine the kind and platform coordinates of *filename*.

    Args:
        filename: Base name of an uploaded file.
        records: Known download records, used for authoritative matches.

    Returns:
        A :class:`FileClassification`; never raises.
    """
    records = records or ()

    if any(marker in filename for marker in CHECKSUM_MARKERS):
        return FileClassification(
            filename=filename,
            kind=_checksum_kind(filename),
            resolution=Resolution.COMMON,
        )

    record = _find_record(filename, records)
    if record is not None:
        return FileClassification(
            filename=filename,
            kind=FileKind.BINARY,
            resolution=Resolution.AUTHORITATIVE,
            os=record.os,
            arch=record.arch,
            version=record.version,
            size=record.size,
            record=record,
        )

    base = strip_sidecar_suffix(filename)
    if base is not None:
        record = _find_record(base, records)
        if record is not None:
            return FileClassification(
                filename=filename,
                kind=kind_from_suffix(filename),
                resolution=Resolution.AUTHORITATIVE,
                os=record.os,
                arch=record.arch,
                version=record.version,
                record=record,
            )

    version = extract_version_from_filename(filename)
    parts = filename.split("-")
    for i, part in enumerate(parts):
        if part in KNOWN_OS_TOKENS:
            arch = parts[i + 1].split(".")[0] if i + 1 < len(parts) else ""
            logger.debug("Heuristic classification for %s: os=%s arch=%s version=%s",
                         filename, part, arch, version)
            return FileClassification(
                filename=filename,
                kind=kind_from_suffix(filename),
                resolution=Resolution.HEURISTIC,
                os=part,
                arch=arch,
                version=version,
            )

    logger.warning("Could not classify %s", filename)
    return FileClassification(
        filename=filename,
        kind=FileKind.UNKNOWN,
        resolution=Resolution.UNKNOWN,
    )
