"""
Artifacts CLI commands — ``rtd artifacts build``, ``rtd artifacts inspect``.

Registered into the main ``cli`` group by ``__main__.py``.
"""

from __future__ import annotations

import json
import sys

import click

from ..utils.colors import _CROSS, badge, error, kv, section, table
from ._inputs import load_download_records, read_json


# ═══════════════════════════════════════════════════════════════════════════
# rtd artifacts (top-level group)
# ═══════════════════════════════════════════════════════════════════════════


@click.group("artifacts")
def artifacts_group():
    """Build and inspect release artifacts documents."""
    pass


# ── build ────────────────────────────────────────────────────────────────


@artifacts_group.command("build")
@click.argument("uploads", type=click.Path(exists=True, dir_okay=False))
@click.option("--downloads", "-d", type=click.Path(exists=True, dir_okay=False),
              help="JSON list of authoritative download records")
@click.option("--pretty", is_flag=True, help="Indent the output")
def artifacts_build(uploads: str, downloads: str, pretty: bool):
    """
    Build an artifacts document from an uploads file.

    UPLOADS maps each uploaded filename to {"url": ..., "sha256": ...}.

    Examples:
      rtd artifacts build uploads.json
      rtd artifacts build uploads.json --downloads downloads.json --pretty
    """
    from runtimedist.artifacts import build_artifacts_document
    from runtimedist.faults import ConfigInvalidFault, Fault

    try:
        mapping = read_json(uploads)
        if not isinstance(mapping, dict):
            raise ConfigInvalidFault(uploads, "expected an object of filename → upload")
        document = build_artifacts_document(mapping, load_download_records(downloads))
    except Fault as e:
        error(f"{_CROSS} {e}")
        sys.exit(1)

    if pretty:
        click.echo(json.dumps(document.to_dict(), indent=2))
    else:
        click.echo(document.to_json())


# ── inspect ──────────────────────────────────────────────────────────────


@artifacts_group.command("inspect")
@click.argument("tag")
@click.option("--store", "-s", "store_dir", default="releases", help="Release store directory")
@click.option("--json-output", "-j", is_flag=True, help="Output as JSON")
def artifacts_inspect(tag: str, store_dir: str, json_output: bool):
    """
    Summarize the artifacts document of a stored release.

    Examples:
      rtd artifacts inspect nodejs-v22.15.0-20251109T120000Z
      rtd artifacts inspect nodejs-multi-20251110T080000Z -j
    """
    from runtimedist.faults import Fault
    from runtimedist.releases import FilesystemReleaseStore

    try:
        release = FilesystemReleaseStore(store_dir).get_release_by_tag(tag)
        if release is None:
            error(f"{_CROSS} Release not found: {tag}")
            sys.exit(1)
        document = release.parse_artifacts()
    except Fault as e:
        error(f"{_CROSS} {e}")
        sys.exit(1)

    if json_output:
        click.echo(json.dumps(document.to_dict(), indent=2))
        return

    meta = document.metadata
    section(release.release_tag)
    kv("Runtime", release.runtime)
    kv("Version", release.version)
    kv("Artifacts", meta.total_artifacts)
    kv("Platforms", meta.platform_count)
    kv("Total size", meta.total_size_bytes)
    click.echo(
        "  "
        + badge("clamav", ok=meta.all_clamav_clean) + " "
        + badge("checksums", ok=meta.all_checksums_verified) + " "
        + badge("signatures", ok=meta.has_signatures)
    )
    click.echo()

    rows = [
        (p.platform, p.binary.filename if p.binary else "—", "yes" if p.audit else "no")
        for p in document.platforms
    ]
    rows += [(c.type, c.filename, "") for c in document.common_files]
    table(["Platform", "File", "Audit"], rows)
