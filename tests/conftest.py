"""
Shared test fixtures and helpers for the runtimedist test suite.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import pytest

from runtimedist.artifacts import (
    ArtifactFile,
    AuditArtifact,
    DownloadRecord,
    PlatformArtifact,
    ReleaseArtifacts,
)
from runtimedist.releases import (
    HostedAsset,
    HostedRelease,
    MemoryReleaseStore,
    Release,
    ReleaseHostingClient,
    parse_semver,
)

NOW = datetime(2025, 11, 9, 12, 0, 0, tzinfo=timezone.utc)


# ============================================================================
# Builders
# ============================================================================


def platform_entry(
    os_name: str,
    arch: str,
    binary: Optional[str],
    sha256: str = "",
    *,
    audit: Optional[str] = None,
    signature: Optional[str] = None,
    size: int = 2048,
) -> PlatformArtifact:
    """One platform entry with download URLs under example.test."""
    base = "https://downloads.example.test"
    return PlatformArtifact(
        platform=f"{os_name}-{arch}",
        platform_os=os_name,
        platform_arch=arch,
        binary=ArtifactFile(filename=binary, size=size, sha256=sha256, url=f"{base}/{binary}") if binary else None,
        audit=AuditArtifact(filename=audit, size=512, url=f"{base}/{audit}", clamav_clean=True) if audit else None,
        signature=ArtifactFile(filename=signature, size=64, url=f"{base}/{signature}") if signature else None,
    )


def make_release(
    runtime: str,
    version: str,
    platforms: Sequence[PlatformArtifact] = (),
    *,
    tag: Optional[str] = None,
    created_at: datetime = NOW,
    release_url: str = "",
) -> Release:
    """A Release row whose artifacts document holds *platforms*."""
    semver = parse_semver(version.split(",")[0])
    tag = tag or f"{runtime}-v{version.replace(',', '_').replace(' ', '')}-{created_at:%Y%m%dT%H%M%SZ}"
    document = ReleaseArtifacts(platforms=list(platforms))
    return Release(
        runtime=runtime,
        version=version,
        release_tag=tag,
        semver_major=semver.major,
        semver_minor=semver.minor,
        semver_patch=semver.patch,
        release_url=release_url or f"https://hosting.example.test/releases/{tag}",
        artifacts=document.to_json(),
        created_at=created_at,
    )


def node_binary(version: str, os_name: str = "linux", arch: str = "x64") -> str:
    ext = "zip" if os_name == "win" else "tar.xz"
    return f"node-v{version}-{os_name}-{arch}.{ext}"


# ============================================================================
# Fake collaborators
# ============================================================================


class FakeHostingClient(ReleaseHostingClient):
    """Records calls; asset URLs point at example.test."""

    def __init__(self, fail_on: Optional[str] = None):
        self.fail_on = fail_on
        self.created: List[Tuple[str, str, str, bool]] = []
        self.uploaded: List[str] = []

    def create_release(self, tag: str, name: str, body: str, draft: bool = False) -> HostedRelease:
        if self.fail_on == "create":
            raise RuntimeError("hosting unavailable")
        self.created.append((tag, name, body, draft))
        return HostedRelease(id=len(self.created), tag=tag, url=f"https://hosting.example.test/releases/{tag}")

    def upload_asset(self, release_id: int, path: str) -> HostedAsset:
        if self.fail_on == "upload":
            raise RuntimeError("upload rejected")
        name = Path(path).name
        self.uploaded.append(name)
        return HostedAsset(
            id=len(self.uploaded),
            name=name,
            download_url=f"https://hosting.example.test/download/{release_id}/{name}",
        )


class SetEvent:
    """Cancellation token that is always set."""

    def is_set(self) -> bool:
        return True


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def memory_store() -> MemoryReleaseStore:
    return MemoryReleaseStore()


@pytest.fixture
def hosting_client() -> FakeHostingClient:
    return FakeHostingClient()


@pytest.fixture
def node_release() -> Release:
    """nodejs 22.15.0 with one linux-x64 binary hashed ``abc123``."""
    return make_release(
        "nodejs",
        "22.15.0",
        [platform_entry("linux", "x64", node_binary("22.15.0"), "abc123")],
        tag="nodejs-v22.15.0-20251109T120000Z",
    )


@pytest.fixture
def download_records(tmp_path) -> Dict[str, DownloadRecord]:
    """Authoritative records for three 22.15.0 binaries."""
    return {
        "linux": DownloadRecord(
            os="linux", arch="x64", version="22.15.0",
            path=str(tmp_path / "node-v22.15.0-linux-x64.tar.xz"), size=30023544,
            checksum_verified=True, clamav_clean=True, gpg_verified=True,
        ),
        "darwin": DownloadRecord(
            os="darwin", arch="arm64", version="22.15.0",
            path=str(tmp_path / "node-v22.15.0-darwin-arm64.tar.gz"), size=48000000,
            checksum_verified=True, clamav_clean=True, gpg_verified=True,
        ),
        "win": DownloadRecord(
            os="windows", arch="x64", version="22.15.0",
            path=str(tmp_path / "node-v22.15.0-win-x64.zip"), size=32000000,
            checksum_verified=True, clamav_clean=False, gpg_verified=True,
        ),
    }


def later(minutes: int) -> datetime:
    return NOW + timedelta(minutes=minutes)
