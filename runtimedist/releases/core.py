"""
Release Core — the persisted release row and semantic-version parsing.

A release row is written once at publish time and never mutated. Its
``version`` is either one semantic version or, for an aggregated
publish, a comma-joined list (``"22.15.0,22.14.0"``).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..artifacts.core import ReleaseArtifacts, format_timestamp, parse_timestamp

_SEMVER_RE = re.compile(r"^(\d+)\.(\d+)\.(\d+)")


# ── Semver ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class SemverResult:
    """
    Outcome of :func:`parse_semver`.

    ``resolved`` is False when the version could not be parsed; the
    numeric parts are then zero and ``error`` says why.
    """

    version: str
    major: int = 0
    minor: int = 0
    patch: int = 0
    resolved: bool = True
    error: str = ""

    @property
    def degraded(self) -> bool:
        return not self.resolved

    @property
    def parts(self) -> tuple:
        return (self.major, self.minor, self.patch)


def parse_semver(version: str) -> SemverResult:
    """
    Parse ``major.minor.patch``; trailing qualifiers are ignored.

    Never raises: unparsable input yields a degraded, zero-valued result.
    """
    match = _SEMVER_RE.match(version.strip())
    if match is None:
        return SemverResult(
            version=version,
            resolved=False,
            error=f"failed to parse version {version!r}",
        )
    major, minor, patch = (int(g) for g in match.groups())
    return SemverResult(version=version, major=major, minor=minor, patch=patch)


def split_versions(version: str) -> List[str]:
    """``"22.15.0, 22.14.0"`` → ``["22.15.0", "22.14.0"]``; empty parts are dropped."""
    return [v.strip() for v in version.split(",") if v.strip()]


# ── Release ─────────────────────────────────────────────────────────────


@dataclass
class Release:
    """One persisted publish event."""

    runtime: str
    version: str
    release_tag: str
    semver_major: int = 0
    semver_minor: int = 0
    semver_patch: int = 0
    release_url: str = ""
    artifacts: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    id: Optional[int] = None

    @property
    def is_aggregated(self) -> bool:
        """True when the row records several versions published together."""
        return "," in self.version

    @property
    def semver(self) -> SemverResult:
        return SemverResult(
            version=self.version,
            major=self.semver_major,
            minor=self.semver_minor,
            patch=self.semver_patch,
        )

    def parse_artifacts(self) -> ReleaseArtifacts:
        """Parse the stored document (raises ``ArtifactsDocumentFault``)."""
        return ReleaseArtifacts.from_json(self.artifacts)

    def with_version(self, version: str, semver: SemverResult) -> "Release":
        """A copy narrowed to a single version."""
        return replace(
            self,
            version=version,
            semver_major=semver.major,
            semver_minor=semver.minor,
            semver_patch=semver.patch,
        )

    # ── Serialisation ────────────────────────────────────────────────

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "runtime": self.runtime,
            "version": self.version,
            "semver_major": self.semver_major,
            "semver_minor": self.semver_minor,
            "semver_patch": self.semver_patch,
            "release_tag": self.release_tag,
            "release_url": self.release_url,
            "artifacts": self.artifacts,
            "created_at": format_timestamp(self.created_at),
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Release":
        created_at = parse_timestamp(d.get("created_at"), "created_at")
        return cls(
            id=d.get("id"),
            runtime=d["runtime"],
            version=d["version"],
            semver_major=int(d.get("semver_major", 0)),
            semver_minor=int(d.get("semver_minor", 0)),
            semver_patch=int(d.get("semver_patch", 0)),
            release_tag=d["release_tag"],
            release_url=d.get("release_url", ""),
            artifacts=d.get("artifacts", ""),
            created_at=created_at or datetime.fromtimestamp(0, timezone.utc),
        )
