"""
PEP 503-style simple index::

    /simple/index.html                       runtimes
    /simple/<runtime>/index.html             major versions
    /simple/<runtime>/v<major>/index.html    every file of that major
    /simple/<runtime>/v<major>/index.json    ["<release-tag>/<binary>", ...]

Runtime directory names are PEP 503-normalized. Distribution links carry
a ``#sha256=`` fragment whenever the file's hash is known.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

from ..faults import GenerationCancelledFault
from .models import DistributionModel, FileModel, RuntimeModel, SiteModel, VersionModel
from .normalize import normalize_package_name
from .resources import SiteResources
from .writer import SiteWriter

logger = logging.getLogger("runtimedist.sitegen.simple")


def _versions_of_major(runtime: RuntimeModel, major: int) -> Iterator[VersionModel]:
    for platform in runtime.platforms:
        for version in platform.versions:
            if version.major == major:
                yield version


def collect_distributions(runtime: RuntimeModel, major: int) -> List[DistributionModel]:
    """Distinct (filename, url) files across every release of *major*, by filename."""
    found: Dict[Tuple[str, str], DistributionModel] = {}

    def add(f: Optional[FileModel], with_hash: bool = True) -> None:
        if f is None:
            return
        key = (f.filename, f.url)
        if key not in found:
            found[key] = DistributionModel(
                filename=f.filename,
                url=f.url,
                sha256=f.sha256 if with_hash else "",
            )

    for version in _versions_of_major(runtime, major):
        for release in version.releases:
            for artifact in release.artifacts:
                add(artifact.binary)
                add(artifact.audit, with_hash=False)
                add(artifact.signature)
                add(artifact.certificate)

    return sorted(found.values(), key=lambda d: (d.filename, d.url))


def collect_artifact_paths(runtime: RuntimeModel, major: int) -> List[str]:
    """Sorted unique ``<release-tag>/<binary filename>`` paths of *major*."""
    paths = set()
    for version in _versions_of_major(runtime, major):
        for release in version.releases:
            if not release.release_tag:
                continue
            for artifact in release.artifacts:
                if artifact.binary is not None:
                    paths.add(f"{release.release_tag}/{artifact.binary.filename}")
    return sorted(paths)


def render_simple_index(
    model: SiteModel,
    out_dir: Path,
    writer: SiteWriter,
    resources: SiteResources,
    cancel: Optional[Any] = None,
) -> None:
    """Render the simple tree under ``<out_dir>/simple``."""
    simple_dir = Path(out_dir) / "simple"

    names = sorted(normalize_package_name(r.name) for r in model.runtimes)
    writer.write(simple_dir / "index.html", resources.render("simple_root.html", names=names))

    for runtime in model.runtimes:
        if cancel is not None and cancel.is_set():
            raise GenerationCancelledFault(f"simple index for {runtime.name}")
        _render_runtime(runtime, simple_dir, writer, resources)

    logger.info("Rendered simple index for %d runtime(s)", len(names))


def _render_runtime(runtime: RuntimeModel, simple_dir: Path, writer: SiteWriter, resources: SiteResources) -> None:
    name = normalize_package_name(runtime.name)
    runtime_dir = simple_dir / name
    majors = runtime.major_versions()

    writer.write(
        runtime_dir / "index.html",
        resources.render("simple_runtime.html", name=name, majors=majors),
    )

    for major in majors:
        major_dir = runtime_dir / f"v{major}"
        distributions = collect_distributions(runtime, major)
        writer.write(
            major_dir / "index.html",
            resources.render("simple_major.html", name=name, major=major, distributions=distributions),
        )

        paths = collect_artifact_paths(runtime, major)
        writer.write(major_dir / "index.json", json.dumps(paths, indent=2))
        logger.debug(
            "Rendered %s v%d: %d distribution(s), %d artifact path(s)",
            name, major, len(distributions), len(paths),
        )
