"""
Release hosting — the interface to wherever release assets are uploaded.

The pipeline performs no network I/O itself; a concrete client (GitHub
releases, an object store, …) is injected by the caller.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class HostedRelease:
    """A release created on the hosting service."""

    id: int
    tag: str
    url: str


@dataclass(frozen=True)
class HostedAsset:
    """An asset uploaded to a hosted release."""

    id: int
    name: str
    download_url: str = ""


class ReleaseHostingClient:
    """Create releases, upload assets and resolve their URLs."""

    def create_release(self, tag: str, name: str, body: str, draft: bool = False) -> HostedRelease:
        raise NotImplementedError

    def upload_asset(self, release_id: int, path: str) -> HostedAsset:
        raise NotImplementedError

    def asset_download_url(self, asset: HostedAsset) -> str:
        return asset.download_url

    def release_url(self, release: HostedRelease) -> str:
        return release.url
