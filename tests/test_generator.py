"""
End-to-end tests for the site generator.
"""

from __future__ import annotations

import pytest
from jinja2 import TemplateNotFound

from runtimedist.faults import (
    ConfigMissingFault,
    GenerationCancelledFault,
    OutputDirectoryFault,
    ReleaseLoadFault,
    RenderFault,
)
from runtimedist.releases import MemoryReleaseStore, ReleaseStore
from runtimedist.sitegen import GenerateOptions, Generator, SiteResources
from runtimedist.sitegen.resources import create_environment

from conftest import SetEvent, later, make_release, node_binary, platform_entry

# 5 human pages (incl. stylesheet) + 4 simple-index files for one runtime/os/version
PAGES_FOR_ONE_VERSION = 9


def snapshot_mtimes(root):
    return {p: p.stat().st_mtime_ns for p in root.rglob("*") if p.is_file()}


class CountdownEvent:
    """Reports set after *n* negative checks."""

    def __init__(self, n: int):
        self.remaining = n

    def is_set(self) -> bool:
        if self.remaining == 0:
            return True
        self.remaining -= 1
        return False


class BrokenSimpleResources(SiteResources):
    def render(self, template_name, **context):
        if template_name.startswith("simple_"):
            raise TemplateNotFound(template_name)
        return super().render(template_name, **context)


@pytest.fixture
def site(tmp_path):
    return tmp_path / "site"


# ════════════════════════════════════════════════════════════════════════
# Happy path
# ════════════════════════════════════════════════════════════════════════


class TestGenerate:
    def test_full_site(self, site, node_release):
        result = Generator(MemoryReleaseStore([node_release])).generate(GenerateOptions(output_dir=str(site)))

        assert (site / "nodejs/linux/v22/22.15.0/index.html").is_file()
        simple = (site / "simple/nodejs/v22/index.html").read_text()
        assert "#sha256=abc123" in simple

        assert result.releases == 1
        assert result.runtimes == 1
        assert result.written == PAGES_FOR_ONE_VERSION
        assert result.unchanged == 0
        assert result.model.runtimes[0].name == "nodejs"

    def test_second_run_writes_nothing(self, site, node_release):
        generator = Generator(MemoryReleaseStore([node_release]))
        generator.generate(GenerateOptions(output_dir=str(site)))
        before = snapshot_mtimes(site)

        result = generator.generate(GenerateOptions(output_dir=str(site)))
        assert result.written == 0
        assert result.unchanged == PAGES_FOR_ONE_VERSION
        assert snapshot_mtimes(site) == before

    def test_new_release_only_touches_affected_pages(self, site, node_release):
        store = MemoryReleaseStore([node_release])
        generator = Generator(store)
        generator.generate(GenerateOptions(output_dir=str(site)))
        version_page = site / "nodejs/linux/v22/22.15.0/index.html"
        before = version_page.stat().st_mtime_ns

        store.create_release(make_release(
            "nodejs", "22.14.0", [platform_entry("linux", "x64", node_binary("22.14.0"))], created_at=later(5),
        ))
        result = generator.generate(GenerateOptions(output_dir=str(site)))

        assert (site / "nodejs/linux/v22/22.14.0/index.html").is_file()
        assert version_page.stat().st_mtime_ns == before
        assert result.written > 0
        assert result.unchanged > 0

    def test_filesystem_store(self, tmp_path, site, node_release):
        ReleaseStore(str(tmp_path / "releases")).create_release(node_release)
        result = Generator(ReleaseStore(str(tmp_path / "releases"))).generate(GenerateOptions(output_dir=str(site)))
        assert result.written == PAGES_FOR_ONE_VERSION

    def test_dry_run(self, site, node_release):
        result = Generator(MemoryReleaseStore([node_release])).generate(
            GenerateOptions(output_dir=str(site), dry_run=True),
        )
        assert result.dry_run
        assert result.written == PAGES_FOR_ONE_VERSION
        assert not site.exists()

    def test_empty_snapshot(self, site):
        result = Generator(MemoryReleaseStore()).generate(GenerateOptions(output_dir=str(site)))
        assert result.releases == 0
        assert result.written == 0
        assert not site.exists()


# ════════════════════════════════════════════════════════════════════════
# Failures
# ════════════════════════════════════════════════════════════════════════


class TestGenerateFailures:
    def test_output_dir_required(self, node_release):
        with pytest.raises(ConfigMissingFault):
            Generator(MemoryReleaseStore([node_release])).generate(GenerateOptions(output_dir=""))

    def test_malformed_release_aborts(self, site, node_release):
        broken = make_release("nodejs", "20.10.0")
        broken.artifacts = "not json"
        with pytest.raises(ReleaseLoadFault):
            Generator(MemoryReleaseStore([node_release, broken])).generate(GenerateOptions(output_dir=str(site)))
        assert not site.exists()

    def test_output_root_is_a_file(self, tmp_path, node_release):
        blocker = tmp_path / "site"
        blocker.write_text("")
        with pytest.raises(OutputDirectoryFault):
            Generator(MemoryReleaseStore([node_release])).generate(GenerateOptions(output_dir=str(blocker / "out")))

    def test_cancelled_before_start(self, site, node_release):
        with pytest.raises(GenerationCancelledFault) as exc_info:
            Generator(MemoryReleaseStore([node_release])).generate(
                GenerateOptions(output_dir=str(site), cancel=SetEvent()),
            )
        assert exc_info.value.metadata["phase"] == "load"
        assert not site.exists()

    def test_cancelled_inside_renderer(self, site, node_release):
        # load, build and "human pages" checks pass; the per-runtime check fires
        with pytest.raises(GenerationCancelledFault) as exc_info:
            Generator(MemoryReleaseStore([node_release])).generate(
                GenerateOptions(output_dir=str(site), cancel=CountdownEvent(3)),
            )
        assert exc_info.value.metadata["phase"] == "human pages for nodejs"
        assert (site / "index.html").is_file()

    def test_render_failure_names_stage(self, site, node_release):
        resources = BrokenSimpleResources(env=create_environment(), stylesheet=b"body {}")
        with pytest.raises(RenderFault) as exc_info:
            Generator(MemoryReleaseStore([node_release]), resources=resources).generate(
                GenerateOptions(output_dir=str(site)),
            )
        assert exc_info.value.stage == "simple"
        assert exc_info.value.metadata["cause"] == "TemplateNotFound"
        assert (site / "nodejs/index.html").is_file()
