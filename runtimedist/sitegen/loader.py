"""
Release Loader — parse release rows and split aggregated ones.

An aggregated row (``version == "22.15.0,22.14.0"``) is expanded into one
view per sub-version. Each view keeps only the platform entries whose
binary or audit filename contains that sub-version; common files and
metadata are copied into every view unfiltered.

Loading is fail-closed: one malformed artifacts document aborts the
whole load.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from ..artifacts.core import PlatformArtifact, ReleaseArtifacts
from ..faults import ArtifactsDocumentFault, ReleaseLoadFault, ReleaseStoreFault
from ..releases.core import Release, SemverResult, parse_semver, split_versions
from ..releases.store import ReleaseReader

logger = logging.getLogger("runtimedist.sitegen.loader")


@dataclass
class ReleaseWithArtifacts:
    """A release row (possibly narrowed to one version) and its parsed document."""

    release: Release
    artifacts: ReleaseArtifacts
    semver: SemverResult = field(default=None)

    def __post_init__(self) -> None:
        if self.semver is None:
            self.semver = self.release.semver

    @property
    def degraded(self) -> bool:
        """True when the version could not be parsed and defaulted to 0.0.0."""
        return self.semver.degraded


def _contains(filename: str, version: str) -> bool:
    return version in filename


def filter_artifacts_for_version(artifacts: ReleaseArtifacts, version: str) -> ReleaseArtifacts:
    """
    Narrow *artifacts* to the platform entries of one version.

    An entry is kept when its binary or audit filename contains *version*;
    each file on a kept entry is retained only if it matches on its own.
    """
    platforms: List[PlatformArtifact] = []
    for platform in artifacts.platforms:
        binary = platform.binary if platform.binary and _contains(platform.binary.filename, version) else None
        audit = platform.audit if platform.audit and _contains(platform.audit.filename, version) else None
        if binary is None and audit is None:
            continue
        platforms.append(PlatformArtifact(
            platform=platform.platform,
            platform_os=platform.platform_os,
            platform_arch=platform.platform_arch,
            binary=binary,
            audit=audit,
            signature=platform.signature if platform.signature and _contains(platform.signature.filename, version) else None,
            certificate=platform.certificate if platform.certificate and _contains(platform.certificate.filename, version) else None,
        ))

    return ReleaseArtifacts(
        platforms=platforms,
        common_files=list(artifacts.common_files),
        metadata=artifacts.metadata,
    )


def split_release(release: Release, artifacts: ReleaseArtifacts) -> List[ReleaseWithArtifacts]:
    """Expand one row into its per-version views (one-to-one if not aggregated)."""
    if not release.is_aggregated:
        return [ReleaseWithArtifacts(release=release, artifacts=artifacts)]

    versions = split_versions(release.version)
    if not versions:
        logger.warning("Release %s lists no versions in %r; skipped", release.release_tag, release.version)
        return []

    views = []
    for version in versions:
        semver = parse_semver(version)
        if semver.degraded:
            logger.warning("Release %s: %s; using 0.0.0", release.release_tag, semver.error)
        views.append(ReleaseWithArtifacts(
            release=release.with_version(version, semver),
            artifacts=filter_artifacts_for_version(artifacts, version),
            semver=semver,
        ))
    return views


def load_releases(reader: ReleaseReader) -> List[ReleaseWithArtifacts]:
    """
    Load every release from *reader* and parse its artifacts document.

    Raises:
        ReleaseLoadFault: If reading fails or any document is malformed.
    """
    try:
        releases = reader.get_all_releases()
    except ReleaseStoreFault as exc:
        raise ReleaseLoadFault("*", exc.message) from exc

    result: List[ReleaseWithArtifacts] = []
    for release in releases:
        try:
            artifacts = release.parse_artifacts()
        except ArtifactsDocumentFault as exc:
            raise ReleaseLoadFault(release.release_tag, exc.message) from exc
        result.extend(split_release(release, artifacts))

    logger.debug("Loaded %d release row(s) as %d view(s)", len(releases), len(result))
    return result
