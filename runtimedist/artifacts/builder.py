"""
Artifacts Builder — fluent API for assembling a release's artifacts document.

Usage::

    document = (
        ArtifactsBuilder(records=download_records)
        .add("node-v22.15.0-linux-x64.tar.xz", url, sha256="dafe2e…")
        .add("node-v22.15.0-linux-x64.tar.xz.audit.json", audit_url)
        .add("SHASUMS256.txt", shasums_url)
        .set_upload_duration(45)
        .build()
    )

Platform entries are keyed internally by ``(version, os, arch)`` so two
versions of the same platform uploaded together never overwrite each
other; the document itself only exposes the ``os-arch`` label.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from .core import (
    ArtifactFile,
    ArtifactsMetadata,
    AuditArtifact,
    CommonFile,
    PlatformArtifact,
    ReleaseArtifacts,
)
from .kinds import (
    DownloadRecord,
    FileClassification,
    FileKind,
    classify_file,
    kind_from_suffix,
)

logger = logging.getLogger("runtimedist.artifacts.builder")

PlatformKey = Tuple[str, str, str]


@dataclass(frozen=True)
class UploadedFile:
    """Where an uploaded file ended up, plus its content hash."""

    url: str
    sha256: str = ""
    size: int = 0

    @classmethod
    def coerce(cls, value: Any) -> "UploadedFile":
        """Accept an ``UploadedFile``, a ``(url, sha256)`` pair or a dict."""
        if isinstance(value, cls):
            return value
        if isinstance(value, dict):
            return cls(
                url=value.get("url", ""),
                sha256=value.get("sha256", "") or "",
                size=int(value.get("size", 0) or 0),
            )
        url, sha256 = value
        return cls(url=url, sha256=sha256 or "")


class ArtifactsBuilder:
    """
    Fluent builder for :class:`ReleaseArtifacts` documents.

    Every ``add*`` / ``set_*`` method returns ``self`` for chaining.
    Input order does not matter: files are processed sorted by name and
    platform entries are emitted sorted by their internal key.
    """

    __slots__ = ("_records", "_uploads", "_clock", "_upload_duration")

    def __init__(
        self,
        *,
        records: Optional[Sequence[DownloadRecord]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._records: List[DownloadRecord] = list(records or [])
        self._uploads: Dict[str, UploadedFile] = {}
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._upload_duration = 0

    # ── Inputs ───────────────────────────────────────────────────────

    def add(self, filename: str, url: str, *, sha256: str = "", size: int = 0) -> "ArtifactsBuilder":
        """Register one uploaded file."""
        self._uploads[filename] = UploadedFile(url=url, sha256=sha256, size=size)
        return self

    def add_uploads(self, uploads: Mapping[str, Any]) -> "ArtifactsBuilder":
        """Register a ``filename → UploadedFile | (url, sha256) | dict`` mapping."""
        for filename, value in uploads.items():
            self._uploads[filename] = UploadedFile.coerce(value)
        return self

    def add_record(self, record: DownloadRecord) -> "ArtifactsBuilder":
        self._records.append(record)
        return self

    def set_upload_duration(self, seconds: int) -> "ArtifactsBuilder":
        self._upload_duration = int(seconds)
        return self

    # ── Build ────────────────────────────────────────────────────────

    def build(self) -> ReleaseArtifacts:
        """
        Classify every registered file and assemble the document.

        Returns:
            A fully-formed :class:`ReleaseArtifacts`.
        """
        now = self._clock()
        platforms: Dict[PlatformKey, PlatformArtifact] = {}
        common_files: List[CommonFile] = []
        total_size = 0

        for filename in sorted(self._uploads):
            upload = self._uploads[filename]
            info = classify_file(filename, self._records)
            size = info.size or upload.size
            total_size += size

            if info.is_common:
                common_files.append(CommonFile(
                    type=info.kind.value,
                    filename=filename,
                    size=size,
                    url=upload.url,
                    uploaded_at=now,
                ))
                continue

            key = (info.version, info.os, info.arch)
            entry = platforms.get(key)
            if entry is None:
                if info.kind is FileKind.UNKNOWN:
                    logger.warning("Grouping unclassified file %s without platform", filename)
                entry = PlatformArtifact(
                    platform=f"{info.os}-{info.arch}",
                    platform_os=info.os,
                    platform_arch=info.arch,
                )
                platforms[key] = entry

            self._attach(entry, filename, info, upload, size, now)

        ordered = [platforms[key] for key in sorted(platforms)]
        return ReleaseArtifacts(
            platforms=ordered,
            common_files=common_files,
            metadata=self._summarize(ordered, total_size),
        )

    # ── Internal ─────────────────────────────────────────────────────

    @staticmethod
    def _attach(
        entry: PlatformArtifact,
        filename: str,
        info: FileClassification,
        upload: UploadedFile,
        size: int,
        now: datetime,
    ) -> None:
        kind = kind_from_suffix(filename)
        if kind is FileKind.AUDIT:
            record = info.record
            entry.audit = AuditArtifact(
                filename=filename,
                size=size,
                url=upload.url,
                clamav_clean=record.clamav_clean if record else False,
                checksum_verified=record.checksum_verified if record else False,
                gpg_verified=record.gpg_verified if record else False,
                uploaded_at=now,
            )
            return

        file = ArtifactFile(
            filename=filename,
            size=size,
            sha256=upload.sha256,
            url=upload.url,
            uploaded_at=now,
        )
        if kind is FileKind.SIGNATURE:
            entry.signature = file
        elif kind is FileKind.CERTIFICATE:
            entry.certificate = file
        else:
            if entry.binary is not None:
                logger.debug("Replacing binary %s with %s on %s",
                             entry.binary.filename, filename, entry.platform)
            entry.binary = file

    def _summarize(self, platforms: List[PlatformArtifact], total_size: int) -> ArtifactsMetadata:
        audits = [p.audit for p in platforms if p.audit is not None]
        return ArtifactsMetadata(
            total_artifacts=len(self._uploads),
            total_size_bytes=total_size,
            upload_duration_seconds=self._upload_duration,
            platform_count=len(platforms),
            has_signatures=any(p.signature is not None for p in platforms),
            has_certificates=any(p.certificate is not None for p in platforms),
            all_clamav_clean=bool(audits) and all(a.clamav_clean for a in audits),
            all_checksums_verified=bool(audits) and all(a.checksum_verified for a in audits),
        )


def build_artifacts_document(
    uploads: Mapping[str, Any],
    records: Optional[Sequence[DownloadRecord]] = None,
    *,
    upload_duration: int = 0,
    clock: Optional[Callable[[], datetime]] = None,
) -> ReleaseArtifacts:
    """One-shot form of :class:`ArtifactsBuilder`."""
    return (
        ArtifactsBuilder(records=records, clock=clock)
        .add_uploads(uploads)
        .set_upload_duration(upload_duration)
        .build()
    )
