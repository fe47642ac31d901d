"""
Site Generator — load → build model → render.

The pipeline is synchronous and single-threaded. Every run re-derives
the full model from the current release snapshot; the idempotent writer
keeps unchanged pages untouched.

Usage::

    from runtimedist.releases import ReleaseStore
    from runtimedist.sitegen import Generator, GenerateOptions

    result = Generator(ReleaseStore("releases")).generate(
        GenerateOptions(output_dir="site"),
    )
    print(result.written, result.unchanged)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional

from jinja2 import TemplateError

from ..faults import ConfigMissingFault, Fault, GenerationCancelledFault, RenderFault
from ..releases.store import ReleaseReader
from .builder import build_model
from .human import render_human_pages
from .loader import load_releases
from .models import SiteModel
from .resources import SiteResources, get_site_resources
from .simple import render_simple_index
from .writer import SiteWriter, ensure_directory

logger = logging.getLogger("runtimedist.sitegen.generator")


@dataclass
class GenerateOptions:
    """
    Args:
        output_dir: Root of the generated site
        dry_run: Render in memory and count would-be writes only
        cancel: Any object with ``is_set()`` (e.g. ``threading.Event``)
    """

    output_dir: str
    dry_run: bool = False
    cancel: Optional[Any] = None


@dataclass
class GenerateResult:
    releases: int = 0
    runtimes: int = 0
    written: int = 0
    unchanged: int = 0
    dry_run: bool = False
    model: SiteModel = field(default_factory=SiteModel, repr=False)


class Generator:
    """Orchestrates one site generation run against a release reader."""

    def __init__(self, reader: ReleaseReader, resources: Optional[SiteResources] = None):
        self.reader = reader
        self._resources = resources

    @property
    def resources(self) -> SiteResources:
        if self._resources is None:
            self._resources = get_site_resources()
        return self._resources

    def generate(self, options: GenerateOptions) -> GenerateResult:
        """
        Generate the complete site.

        Raises:
            ConfigMissingFault: If no output directory was given.
            ReleaseLoadFault: If any release row cannot be loaded.
            OutputDirectoryFault: If the output root cannot be created.
            RenderFault: If a renderer stage fails (``stage`` names it).
            GenerationCancelledFault: If ``options.cancel`` was set.
        """
        if not options.output_dir:
            raise ConfigMissingFault("sitegen.output_dir")

        out_dir = Path(options.output_dir)
        cancel = options.cancel
        logger.info("Starting site generation: output=%s dry_run=%s", out_dir, options.dry_run)

        self._check_cancel(cancel, "load")
        releases = load_releases(self.reader)
        logger.info("Loaded %d release view(s)", len(releases))

        result = GenerateResult(releases=len(releases), dry_run=options.dry_run)
        if not releases:
            logger.warning("No releases found; nothing to generate")
            return result

        self._check_cancel(cancel, "build")
        model = build_model(releases)
        result.model = model
        result.runtimes = len(model.runtimes)
        logger.info("Built site model: %d runtime(s)", result.runtimes)

        if options.dry_run:
            logger.info("Dry run: rendering without writing files")
        else:
            ensure_directory(out_dir)

        writer = SiteWriter(dry_run=options.dry_run)
        resources = self.resources

        self._check_cancel(cancel, "human pages")
        self._run_stage("human", lambda: render_human_pages(model, out_dir, writer, resources, cancel))

        self._check_cancel(cancel, "simple index")
        self._run_stage("simple", lambda: render_simple_index(model, out_dir, writer, resources, cancel))

        result.written = writer.written
        result.unchanged = writer.unchanged
        logger.info(
            "Site generation complete: %d written, %d unchanged%s",
            result.written, result.unchanged, " (dry run)" if options.dry_run else "",
        )
        return result

    # ── Internal ─────────────────────────────────────────────────────

    @staticmethod
    def _check_cancel(cancel: Optional[Any], phase: str) -> None:
        if cancel is not None and cancel.is_set():
            logger.warning("Cancellation requested before %s", phase)
            raise GenerationCancelledFault(phase)

    @staticmethod
    def _run_stage(stage: str, render: Callable[[], None]) -> None:
        try:
            render()
        except GenerationCancelledFault:
            raise
        except (Fault, TemplateError, OSError) as exc:
            raise RenderFault(stage, str(exc), metadata={"cause": type(exc).__name__}) from exc
