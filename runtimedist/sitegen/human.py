"""
Human-browsable page tree::

    /index.html
    /<runtime>/index.html
    /<runtime>/<os>/index.html
    /<runtime>/<os>/v<major>/<version>/index.html
    /assets/style.css
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..faults import GenerationCancelledFault
from .models import MajorVersionGroup, PlatformModel, RuntimeModel, SiteModel, VersionModel
from .resources import SiteResources
from .writer import SiteWriter

logger = logging.getLogger("runtimedist.sitegen.human")


def group_by_major(versions: List[VersionModel]) -> List[MajorVersionGroup]:
    """Group an already-sorted version list by major, newest major first."""
    groups: Dict[int, MajorVersionGroup] = {}
    for version in versions:
        groups.setdefault(version.major, MajorVersionGroup(major=version.major)).versions.append(version)
    return [groups[major] for major in sorted(groups, reverse=True)]


def _check_cancel(cancel: Optional[Any], phase: str) -> None:
    if cancel is not None and cancel.is_set():
        raise GenerationCancelledFault(phase)


def render_human_pages(
    model: SiteModel,
    out_dir: Path,
    writer: SiteWriter,
    resources: SiteResources,
    cancel: Optional[Any] = None,
) -> None:
    """Render the whole human tree through *writer*."""
    out_dir = Path(out_dir)

    writer.write(out_dir / "assets" / "style.css", resources.stylesheet)
    writer.write(
        out_dir / "index.html",
        resources.render("root.html", root="", runtimes=model.runtimes),
    )

    for runtime in model.runtimes:
        _check_cancel(cancel, f"human pages for {runtime.name}")
        _render_runtime(runtime, out_dir / runtime.name, writer, resources)

    logger.info("Rendered human pages for %d runtime(s)", len(model.runtimes))


def _render_runtime(runtime: RuntimeModel, runtime_dir: Path, writer: SiteWriter, resources: SiteResources) -> None:
    writer.write(
        runtime_dir / "index.html",
        resources.render("runtime.html", root="../", runtime=runtime),
    )
    for platform in runtime.platforms:
        _render_os(runtime.name, platform, runtime_dir / platform.os, writer, resources)


def _render_os(runtime_name: str, platform: PlatformModel, os_dir: Path, writer: SiteWriter, resources: SiteResources) -> None:
    writer.write(
        os_dir / "index.html",
        resources.render(
            "os.html",
            root="../../",
            runtime=runtime_name,
            os=platform.os,
            versions_by_major=group_by_major(platform.versions),
        ),
    )

    for version in platform.versions:
        version_dir = os_dir / f"v{version.major}" / version.version
        writer.write(
            version_dir / "index.html",
            resources.render(
                "version.html",
                root="../../../../",
                runtime=runtime_name,
                os=platform.os,
                major=version.major,
                version=version.version,
                releases=version.releases,
            ),
        )
