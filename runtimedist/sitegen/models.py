"""
Site Model — the sorted hierarchy the renderers walk.

    SiteModel
      └─ RuntimeModel        (name ascending)
           └─ PlatformModel  (linux, mac, windows, then others ascending)
                └─ VersionModel   (major ↓ minor ↓ patch ↓)
                     └─ ReleaseModel   (created_at ↓)
                          └─ ArtifactModel  (only entries of this OS)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass(frozen=True)
class FileModel:
    filename: str
    size: int = 0
    sha256: str = ""
    url: str = ""


@dataclass
class ArtifactModel:
    platform: str
    platform_os: str
    platform_arch: str
    binary: Optional[FileModel] = None
    audit: Optional[FileModel] = None
    signature: Optional[FileModel] = None
    certificate: Optional[FileModel] = None

    def files(self) -> List[FileModel]:
        """Present files in display order."""
        return [f for f in (self.binary, self.audit, self.signature, self.certificate) if f is not None]


@dataclass
class ReleaseModel:
    release_tag: str
    release_url: str
    created_at: datetime
    artifacts: List[ArtifactModel] = field(default_factory=list)


@dataclass
class VersionModel:
    major: int
    minor: int
    patch: int
    version: str
    releases: List[ReleaseModel] = field(default_factory=list)


@dataclass
class PlatformModel:
    """All versions shipped for one OS column (``linux``, ``mac``, …)."""

    os: str
    versions: List[VersionModel] = field(default_factory=list)


@dataclass
class RuntimeModel:
    name: str
    platforms: List[PlatformModel] = field(default_factory=list)

    def major_versions(self) -> List[int]:
        """Unique major versions across every OS, ascending."""
        return sorted({v.major for p in self.platforms for v in p.versions})


@dataclass
class SiteModel:
    runtimes: List[RuntimeModel] = field(default_factory=list)


@dataclass(frozen=True)
class DistributionModel:
    """One link on a simple-index page."""

    filename: str
    url: str
    sha256: str = ""

    @property
    def href(self) -> str:
        if self.sha256:
            return f"{self.url}#sha256={self.sha256}"
        return self.url


@dataclass
class MajorVersionGroup:
    """Versions of one OS column sharing a major version."""

    major: int
    versions: List[VersionModel] = field(default_factory=list)
