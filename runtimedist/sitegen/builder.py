"""
Site Model Builder — group (release, artifacts) views into the site model.

Grouping uses one flat mapping keyed by the composite
``(runtime, os, major, minor, patch)`` tuple, followed by a separate
ordering pass:

- runtimes ascending by name
- OS columns linux, mac, windows, then any other name ascending
- major, minor and patch each descending
- releases of one version by ``created_at`` descending (tag ascending on ties)

Platform entries with no binary are skipped. ``darwin`` becomes ``mac``.
"""

from __future__ import annotations

import logging
from datetime import timezone
from typing import Dict, Iterable, List, Optional, Tuple

from ..artifacts.core import ArtifactFile, AuditArtifact, PlatformArtifact
from .loader import ReleaseWithArtifacts
from .models import (
    ArtifactModel,
    FileModel,
    PlatformModel,
    ReleaseModel,
    RuntimeModel,
    SiteModel,
    VersionModel,
)

logger = logging.getLogger("runtimedist.sitegen.builder")

OS_ORDER = ("linux", "mac", "windows")
UNKNOWN_OS = "unknown"

_BucketKey = Tuple[str, str, int, int, int]


def normalize_os(name: str) -> str:
    """``darwin`` → ``mac``; every other name passes through unchanged."""
    if name == "darwin":
        return "mac"
    return name


def _os_column(name: str) -> str:
    return normalize_os(name) or UNKNOWN_OS


def sorted_os_names(names: Iterable[str]) -> List[str]:
    """Fixed-order OS columns first, then the remainder sorted."""
    present = set(names)
    fixed = [name for name in OS_ORDER if name in present]
    rest = sorted(present.difference(OS_ORDER))
    return fixed + rest


# ── Projection ──────────────────────────────────────────────────────────


def _file_model(f: Optional[ArtifactFile]) -> Optional[FileModel]:
    if f is None:
        return None
    return FileModel(filename=f.filename, size=f.size, sha256=f.sha256, url=f.url)


def _audit_model(a: Optional[AuditArtifact]) -> Optional[FileModel]:
    if a is None:
        return None
    return FileModel(filename=a.filename, size=a.size, url=a.url)


def _artifact_model(p: PlatformArtifact) -> ArtifactModel:
    return ArtifactModel(
        platform=p.platform,
        platform_os=p.platform_os,
        platform_arch=p.platform_arch,
        binary=_file_model(p.binary),
        audit=_audit_model(p.audit),
        signature=_file_model(p.signature),
        certificate=_file_model(p.certificate),
    )


def release_model_for_os(view: ReleaseWithArtifacts, os_name: str) -> ReleaseModel:
    """Project one view onto one OS column, keeping only that OS's entries."""
    release = view.release
    return ReleaseModel(
        release_tag=release.release_tag,
        release_url=release.release_url,
        created_at=release.created_at.astimezone(timezone.utc),
        artifacts=[
            _artifact_model(p)
            for p in view.artifacts.platforms
            if p.binary is not None and _os_column(p.platform_os) == os_name
        ],
    )


# ── Builder ─────────────────────────────────────────────────────────────


def _group(views: Iterable[ReleaseWithArtifacts]) -> Dict[_BucketKey, List[ReleaseWithArtifacts]]:
    buckets: Dict[_BucketKey, List[ReleaseWithArtifacts]] = {}
    for view in views:
        release = view.release
        for platform in view.artifacts.platforms:
            if platform.binary is None:
                continue
            key = (
                release.runtime,
                _os_column(platform.platform_os),
                release.semver_major,
                release.semver_minor,
                release.semver_patch,
            )
            bucket = buckets.setdefault(key, [])
            # one entry per view even when it ships several archs for this OS;
            # views split from one aggregated row share a tag but stay separate
            if all(v is not view for v in bucket):
                bucket.append(view)
    return buckets


def _newest_first(views: List[ReleaseWithArtifacts]) -> List[ReleaseWithArtifacts]:
    ordered = sorted(views, key=lambda v: v.release.release_tag)
    ordered.sort(key=lambda v: v.release.created_at, reverse=True)
    return ordered


def build_model(releases: Iterable[ReleaseWithArtifacts]) -> SiteModel:
    """
    Build the sorted site model from loaded release views.

    An empty input yields ``SiteModel(runtimes=[])``.
    """
    buckets = _group(releases)
    if not buckets:
        return SiteModel(runtimes=[])

    runtimes: Dict[str, Dict[str, List[_BucketKey]]] = {}
    for key in buckets:
        runtimes.setdefault(key[0], {}).setdefault(key[1], []).append(key)

    model = SiteModel(runtimes=[])
    for runtime_name in sorted(runtimes):
        columns = runtimes[runtime_name]
        runtime = RuntimeModel(name=runtime_name)
        for os_name in sorted_os_names(columns):
            platform = PlatformModel(os=os_name)
            for key in sorted(columns[os_name], key=lambda k: k[2:], reverse=True):
                views = _newest_first(buckets[key])
                _, _, major, minor, patch = key
                platform.versions.append(VersionModel(
                    major=major,
                    minor=minor,
                    patch=patch,
                    version=views[0].release.version,
                    releases=[release_model_for_os(v, os_name) for v in views],
                ))
            runtime.platforms.append(platform)
        model.runtimes.append(runtime)

    logger.debug(
        "Built site model: %d runtime(s), %d version bucket(s)",
        len(model.runtimes), len(buckets),
    )
    return model
