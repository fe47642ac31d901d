"""
Runtimedist Site Generator — static catalog of published runtime releases.

Pipeline::

    ReleaseReader ──► load_releases ──► build_model ──► render_human_pages
                      (split aggregated)  (SiteModel)   render_simple_index
                                                             │
                                                        SiteWriter (idempotent)
"""

from .models import (
    ArtifactModel,
    DistributionModel,
    FileModel,
    MajorVersionGroup,
    PlatformModel,
    ReleaseModel,
    RuntimeModel,
    SiteModel,
    VersionModel,
)
from .loader import ReleaseWithArtifacts, filter_artifacts_for_version, load_releases, split_release
from .builder import build_model, normalize_os, sorted_os_names
from .normalize import normalize_package_name
from .writer import SiteWriter, content_matches, ensure_directory
from .resources import SiteResources, format_bytes, get_site_resources
from .human import group_by_major, render_human_pages
from .simple import collect_artifact_paths, collect_distributions, render_simple_index
from .generator import GenerateOptions, GenerateResult, Generator

__all__ = [
    # Model
    "ArtifactModel",
    "DistributionModel",
    "FileModel",
    "MajorVersionGroup",
    "PlatformModel",
    "ReleaseModel",
    "RuntimeModel",
    "SiteModel",
    "VersionModel",
    # Loader / builder
    "ReleaseWithArtifacts",
    "filter_artifacts_for_version",
    "load_releases",
    "split_release",
    "build_model",
    "normalize_os",
    "sorted_os_names",
    "normalize_package_name",
    # Rendering
    "SiteWriter",
    "content_matches",
    "ensure_directory",
    "SiteResources",
    "format_bytes",
    "get_site_resources",
    "group_by_major",
    "render_human_pages",
    "collect_artifact_paths",
    "collect_distributions",
    "render_simple_index",
    # Orchestration
    "GenerateOptions",
    "GenerateResult",
    "Generator",
]
