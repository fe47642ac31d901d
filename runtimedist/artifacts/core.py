"""
Artifact Core — the artifacts document persisted with every release.

Every release row stores one document describing the files uploaded
for it, grouped per platform:

.. code-block:: json

    {
        "platforms": [
            {
                "platform": "linux-x64",
                "platform_os": "linux",
                "platform_arch": "x64",
                "binary": {"filename": "...", "size": 1, "sha256": "...", "url": "...", "uploaded_at": "..."},
                "audit": {"filename": "...", "size": 1, "url": "...", "clamav_clean": true, ...},
                "signature": {...},
                "certificate": {...}
            }
        ],
        "common_files": [{"type": "checksum_file", "filename": "SHASUMS256.txt", ...}],
        "metadata": {"total_artifacts": 10, "platform_count": 3, ...}
    }

``binary`` and ``audit`` are always serialised (``null`` when absent);
``signature``, ``certificate`` and ``sha256`` are omitted when empty.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..faults import ArtifactsDocumentFault


# ── Timestamps ──────────────────────────────────────────────────────────


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """ISO-8601 UTC with a ``Z`` suffix, or ``None``."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_timestamp(value: Any, where: str = "uploaded_at") -> Optional[datetime]:
    """Inverse of :func:`format_timestamp`; empty values yield ``None``."""
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ArtifactsDocumentFault(f"{where} must be a string, got {type(value).__name__}")
    raw = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError as exc:
        raise ArtifactsDocumentFault(f"{where} is not an ISO-8601 timestamp: {value!r}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# ── Field coercion ──────────────────────────────────────────────────────


def _get_str(d: Dict[str, Any], key: str, where: str) -> str:
    value = d.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ArtifactsDocumentFault(f"{where}.{key} must be a string")
    return value


def _get_int(d: Dict[str, Any], key: str, where: str) -> int:
    value = d.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ArtifactsDocumentFault(f"{where}.{key} must be an integer")
    return value


def _get_bool(d: Dict[str, Any], key: str, where: str) -> bool:
    value = d.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ArtifactsDocumentFault(f"{where}.{key} must be a boolean")
    return value


def _get_object(d: Dict[str, Any], key: str, where: str) -> Optional[Dict[str, Any]]:
    value = d.get(key)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise ArtifactsDocumentFault(f"{where}.{key} must be an object")
    return value


def _get_list(d: Dict[str, Any], key: str, where: str) -> List[Any]:
    value = d.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ArtifactsDocumentFault(f"{where}.{key} must be a list")
    return value


# ── Value Objects ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class ArtifactFile:
    """A binary, signature or certificate file."""

    filename: str
    size: int = 0
    sha256: str = ""
    url: str = ""
    uploaded_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"filename": self.filename, "size": self.size}
        if self.sha256:
            d["sha256"] = self.sha256
        d["url"] = self.url
        d["uploaded_at"] = format_timestamp(self.uploaded_at)
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any], where: str = "file") -> "ArtifactFile":
        return cls(
            filename=_get_str(d, "filename", where),
            size=_get_int(d, "size", where),
            sha256=_get_str(d, "sha256", where),
            url=_get_str(d, "url", where),
            uploaded_at=parse_timestamp(d.get("uploaded_at"), f"{where}.uploaded_at"),
        )


@dataclass(frozen=True)
class AuditArtifact:
    """An ``.audit.json`` report with its verification verdicts."""

    filename: str
    size: int = 0
    url: str = ""
    clamav_clean: bool = False
    checksum_verified: bool = False
    gpg_verified: bool = False
    uploaded_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filename": self.filename,
            "size": self.size,
            "url": self.url,
            "clamav_clean": self.clamav_clean,
            "checksum_verified": self.checksum_verified,
            "gpg_verified": self.gpg_verified,
            "uploaded_at": format_timestamp(self.uploaded_at),
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any], where: str = "audit") -> "AuditArtifact":
        return cls(
            filename=_get_str(d, "filename", where),
            size=_get_int(d, "size", where),
            url=_get_str(d, "url", where),
            clamav_clean=_get_bool(d, "clamav_clean", where),
            checksum_verified=_get_bool(d, "checksum_verified", where),
            gpg_verified=_get_bool(d, "gpg_verified", where),
            uploaded_at=parse_timestamp(d.get("uploaded_at"), f"{where}.uploaded_at"),
        )


@dataclass(frozen=True)
class CommonFile:
    """A release-level file that belongs to no platform (checksums, …)."""

    type: str
    filename: str
    size: int = 0
    url: str = ""
    uploaded_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "filename": self.filename,
            "size": self.size,
            "url": self.url,
            "uploaded_at": format_timestamp(self.uploaded_at),
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any], where: str = "common_file") -> "CommonFile":
        return cls(
            type=_get_str(d, "type", where),
            filename=_get_str(d, "filename", where),
            size=_get_int(d, "size", where),
            url=_get_str(d, "url", where),
            uploaded_at=parse_timestamp(d.get("uploaded_at"), f"{where}.uploaded_at"),
        )


@dataclass
class PlatformArtifact:
    """
    All files shipped for one platform of one version.

    Holds at most one file per role.
    """

    platform: str
    platform_os: str
    platform_arch: str
    binary: Optional[ArtifactFile] = None
    audit: Optional[AuditArtifact] = None
    signature: Optional[ArtifactFile] = None
    certificate: Optional[ArtifactFile] = None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "platform": self.platform,
            "platform_os": self.platform_os,
            "platform_arch": self.platform_arch,
            "binary": self.binary.to_dict() if self.binary else None,
            "audit": self.audit.to_dict() if self.audit else None,
        }
        if self.signature is not None:
            d["signature"] = self.signature.to_dict()
        if self.certificate is not None:
            d["certificate"] = self.certificate.to_dict()
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any], where: str = "platform") -> "PlatformArtifact":
        binary = _get_object(d, "binary", where)
        audit = _get_object(d, "audit", where)
        signature = _get_object(d, "signature", where)
        certificate = _get_object(d, "certificate", where)
        return cls(
            platform=_get_str(d, "platform", where),
            platform_os=_get_str(d, "platform_os", where),
            platform_arch=_get_str(d, "platform_arch", where),
            binary=ArtifactFile.from_dict(binary, f"{where}.binary") if binary is not None else None,
            audit=AuditArtifact.from_dict(audit, f"{where}.audit") if audit is not None else None,
            signature=ArtifactFile.from_dict(signature, f"{where}.signature") if signature is not None else None,
            certificate=ArtifactFile.from_dict(certificate, f"{where}.certificate") if certificate is not None else None,
        )


@dataclass
class ArtifactsMetadata:
    """Summary counters and verification flags for a document."""

    total_artifacts: int = 0
    total_size_bytes: int = 0
    upload_duration_seconds: int = 0
    platform_count: int = 0
    has_signatures: bool = False
    has_certificates: bool = False
    all_clamav_clean: bool = False
    all_checksums_verified: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_artifacts": self.total_artifacts,
            "total_size_bytes": self.total_size_bytes,
            "upload_duration_seconds": self.upload_duration_seconds,
            "platform_count": self.platform_count,
            "has_signatures": self.has_signatures,
            "has_certificates": self.has_certificates,
            "all_clamav_clean": self.all_clamav_clean,
            "all_checksums_verified": self.all_checksums_verified,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any], where: str = "metadata") -> "ArtifactsMetadata":
        return cls(
            total_artifacts=_get_int(d, "total_artifacts", where),
            total_size_bytes=_get_int(d, "total_size_bytes", where),
            upload_duration_seconds=_get_int(d, "upload_duration_seconds", where),
            platform_count=_get_int(d, "platform_count", where),
            has_signatures=_get_bool(d, "has_signatures", where),
            has_certificates=_get_bool(d, "has_certificates", where),
            all_clamav_clean=_get_bool(d, "all_clamav_clean", where),
            all_checksums_verified=_get_bool(d, "all_checksums_verified", where),
        )


# ── Document ────────────────────────────────────────────────────────────


@dataclass
class ReleaseArtifacts:
    """
    The artifacts document of one release.

    This is what gets serialised into the release row at publish time
    and parsed back by the site loader.
    """

    platforms: List[PlatformArtifact] = field(default_factory=list)
    common_files: List[CommonFile] = field(default_factory=list)
    metadata: ArtifactsMetadata = field(default_factory=ArtifactsMetadata)

    # ── Queries ──────────────────────────────────────────────────────

    @property
    def binaries(self) -> List[ArtifactFile]:
        """Binaries of every platform entry, in document order."""
        return [p.binary for p in self.platforms if p.binary is not None]

    def platforms_for_os(self, os_name: str) -> List[PlatformArtifact]:
        return [p for p in self.platforms if p.platform_os == os_name]

    # ── Serialisation ────────────────────────────────────────────────

    def to_dict(self) -> Dict[str, Any]:
        return {
            "platforms": [p.to_dict() for p in self.platforms],
            "common_files": [c.to_dict() for c in self.common_files],
            "metadata": self.metadata.to_dict(),
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_dict(cls, d: Any) -> "ReleaseArtifacts":
        if not isinstance(d, dict):
            raise ArtifactsDocumentFault(f"document must be an object, got {type(d).__name__}")
        platforms = []
        for i, item in enumerate(_get_list(d, "platforms", "document")):
            if not isinstance(item, dict):
                raise ArtifactsDocumentFault(f"platforms[{i}] must be an object")
            platforms.append(PlatformArtifact.from_dict(item, f"platforms[{i}]"))
        common_files = []
        for i, item in enumerate(_get_list(d, "common_files", "document")):
            if not isinstance(item, dict):
                raise ArtifactsDocumentFault(f"common_files[{i}] must be an object")
            common_files.append(CommonFile.from_dict(item, f"common_files[{i}]"))
        metadata = _get_object(d, "metadata", "document")
        return cls(
            platforms=platforms,
            common_files=common_files,
            metadata=ArtifactsMetadata.from_dict(metadata) if metadata is not None else ArtifactsMetadata(),
        )

    @classmethod
    def from_json(cls, raw: str) -> "ReleaseArtifacts":
        """
        Parse a serialised document.

        Raises:
            ArtifactsDocumentFault: On malformed JSON or wrongly-typed structure.
        """
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as exc:
            raise ArtifactsDocumentFault(f"malformed JSON: {exc}") from exc
        return cls.from_dict(data)
