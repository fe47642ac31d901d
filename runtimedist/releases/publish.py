"""
Release Publisher — turn a set of verified downloads into a release row.

Steps::

    create hosted release → upload files (hashing locally) →
    build artifacts document → record release row

Several versions published together become one *aggregated* release
whose row version is the comma-joined version list.
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Sequence

from ..artifacts.builder import ArtifactsBuilder, UploadedFile
from ..artifacts.kinds import AUDIT_SUFFIX, DownloadRecord, classify_file, FileKind
from ..faults import PublishFault
from .core import Release, parse_semver
from .hosting import ReleaseHostingClient
from .store import ReleaseWriter

if TYPE_CHECKING:
    from ..config import PublishConfig

logger = logging.getLogger("runtimedist.releases.publish")

TAG_TIMESTAMP_FORMAT = "%Y%m%dT%H%M%SZ"
DEFAULT_NAME_TEMPLATE = "{runtime} {version}"


def file_sha256(path: str, chunk_size: int = 65536) -> str:
    """Hex SHA-256 of a file, read in chunks."""
    h = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(chunk_size), b""):
            h.update(chunk)
    return h.hexdigest()


def collect_artifact_files(output_dir: str, versions: Sequence[str]) -> List[str]:
    """Files in *output_dir* whose name mentions any of *versions*, sorted."""
    root = Path(output_dir)
    return [
        str(f) for f in sorted(root.iterdir())
        if f.is_file() and any(v in f.name for v in versions)
    ]


def format_release_name(template: str, runtime: str, version: str) -> str:
    if not template:
        return f"{runtime} {version}"
    return template.replace("{runtime}", runtime).replace("{version}", version)


def _audit_reports_gpg_failure(path: str) -> bool:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError:
        return False
    if "GPG verification failed" in text:
        return True
    try:
        data = json.loads(text)
    except ValueError:
        return False
    return isinstance(data, dict) and data.get("gpg_verified") is False


def generate_release_body(
    runtime: str,
    versions: Sequence[str],
    records: Sequence[DownloadRecord],
    files: Sequence[str] = (),
) -> str:
    """Markdown body listing included platforms and verification status."""
    lines = [
        f"# {runtime.title()} {', '.join(versions)}",
        "",
        "Automatically generated release containing verified runtime binaries.",
        "",
        "## Included Platforms",
        "",
    ]

    groups: Dict[str, List[str]] = {}
    for record in records:
        info = classify_file(record.filename, records)
        if info.kind is not FileKind.BINARY:
            continue
        groups.setdefault(f"{record.os}-{record.arch}", []).append(record.filename)
    for platform in sorted(groups):
        for filename in sorted(groups[platform]):
            lines.append(f"- {platform} ({filename})")

    gpg_failure = any(
        _audit_reports_gpg_failure(path)
        for path in files
        if path.endswith(AUDIT_SUFFIX)
    )

    lines += ["", "## Verification", "", "All binaries have been:", "- ✓ Checksum verified"]
    if not gpg_failure:
        lines.append("- ✓ GPG signature verified")
    lines.append("- ✓ ClamAV scanned")
    return "\n".join(lines) + "\n"


class ReleasePublisher:
    """
    Publishes downloads through a hosting client and records the release.

    Args:
        client: Release-hosting client (creates releases, uploads assets)
        writer: Release writer receiving the final row
        name_template: Release name template for single-version releases
        draft: Create hosted releases as drafts
        clock: Injectable UTC clock (tests)
    """

    def __init__(
        self,
        client: ReleaseHostingClient,
        writer: ReleaseWriter,
        *,
        name_template: str = DEFAULT_NAME_TEMPLATE,
        draft: bool = False,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if client is None:
            raise PublishFault("setup", "hosting client is required")
        if writer is None:
            raise PublishFault("setup", "release writer is required")
        self.client = client
        self.writer = writer
        self.name_template = name_template
        self.draft = draft
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @classmethod
    def from_config(
        cls,
        client: ReleaseHostingClient,
        writer: ReleaseWriter,
        config: "PublishConfig",
        *,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> "ReleasePublisher":
        return cls(client, writer, name_template=config.name_template, draft=config.draft, clock=clock)

    def release_tag(self, runtime: str, versions: Sequence[str], now: datetime) -> str:
        stamp = now.strftime(TAG_TIMESTAMP_FORMAT)
        if len(versions) == 1:
            return f"{runtime}-v{versions[0]}-{stamp}"
        return f"{runtime}-multi-{stamp}"

    def release_name(self, runtime: str, versions: Sequence[str], now: datetime) -> str:
        if len(versions) == 1:
            return format_release_name(self.name_template, runtime, versions[0])
        return f"{runtime.title()} (multi) {now.strftime('%Y-%m-%d')}"

    def publish(
        self,
        runtime: str,
        versions: Sequence[str],
        files: Sequence[str],
        records: Sequence[DownloadRecord],
    ) -> Release:
        """
        Create, upload and record one (possibly aggregated) release.

        Raises:
            PublishFault: If the hosting client fails.
            ReleaseExistsFault: If the tag was already recorded.
        """
        if not versions:
            raise PublishFault("setup", "at least one version is required")

        now = self._clock()
        tag = self.release_tag(runtime, versions, now)
        name = self.release_name(runtime, versions, now)
        body = generate_release_body(runtime, versions, records, files)

        logger.info("Creating release %s (%s)", tag, ", ".join(versions))
        try:
            hosted = self.client.create_release(tag, name, body, self.draft)
        except Exception as exc:
            raise PublishFault("create_release", str(exc), metadata={"tag": tag}) from exc

        started = time.monotonic()
        uploads = self._upload_all(hosted.id, files)
        duration = int(time.monotonic() - started)

        document = (
            ArtifactsBuilder(records=records, clock=lambda: now)
            .add_uploads(uploads)
            .set_upload_duration(duration)
            .build()
        )

        semver = parse_semver(versions[0])
        if semver.degraded:
            logger.warning("Recording %s with zero semver: %s", tag, semver.error)

        release = Release(
            runtime=runtime,
            version=",".join(versions),
            semver_major=semver.major,
            semver_minor=semver.minor,
            semver_patch=semver.patch,
            release_tag=tag,
            release_url=self.client.release_url(hosted),
            artifacts=document.to_json(),
            created_at=now,
        )
        self.writer.create_release(release)
        logger.info("Release %s recorded with %d artifact(s)", tag, len(uploads))
        return release

    def publish_directory(
        self,
        runtime: str,
        versions: Sequence[str],
        output_dir: str,
        records: Sequence[DownloadRecord],
    ) -> Release:
        """Publish every file in *output_dir* that belongs to *versions*."""
        try:
            files = collect_artifact_files(output_dir, versions)
        except OSError as exc:
            raise PublishFault("collect", f"{output_dir}: {exc}") from exc
        logger.info("Collected %d file(s) from %s", len(files), output_dir)
        return self.publish(runtime, versions, files, records)

    def _upload_all(self, release_id: int, files: Sequence[str]) -> Dict[str, UploadedFile]:
        uploaded: Dict[str, UploadedFile] = {}
        for path in files:
            filename = os.path.basename(path)
            try:
                sha256 = file_sha256(path)
                size = os.path.getsize(path)
            except OSError as exc:
                logger.warning("Failed to hash %s: %s", filename, exc)
                sha256, size = "", 0

            try:
                asset = self.client.upload_asset(release_id, path)
            except Exception as exc:
                raise PublishFault("upload_asset", f"{filename}: {exc}") from exc

            url = self.client.asset_download_url(asset)
            uploaded[filename] = UploadedFile(url=url, sha256=sha256, size=size)
            logger.info("Uploaded %s → %s", filename, url)
        return uploaded
