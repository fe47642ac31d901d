"""
Release CLI commands — ``rtd releases list``.
"""

from __future__ import annotations

import json
import sys

import click

from ..utils.colors import _CROSS, error, table, warning


@click.group("releases")
def releases_group():
    """Query the release store."""
    pass


@releases_group.command("list")
@click.option("--store", "-s", "store_dir", default="releases", help="Release store directory")
@click.option("--runtime", "-r", default="", help="Only releases of this runtime")
@click.option("--json-output", "-j", is_flag=True, help="Output as JSON")
def releases_list(store_dir: str, runtime: str, json_output: bool):
    """
    List stored releases, newest first.

    Examples:
      rtd releases list --store ./releases
      rtd releases list -r nodejs -j
    """
    from runtimedist.faults import Fault
    from runtimedist.releases import FilesystemReleaseStore

    try:
        store = FilesystemReleaseStore(store_dir)
        releases = store.get_releases_by_runtime(runtime) if runtime else store.get_all_releases()
    except Fault as e:
        error(f"{_CROSS} {e}")
        sys.exit(1)

    if json_output:
        data = [
            {k: v for k, v in r.to_dict().items() if k != "artifacts"}
            for r in releases
        ]
        click.echo(json.dumps(data, indent=2))
        return

    if not releases:
        warning("No releases found.")
        return

    table(
        ["Tag", "Runtime", "Version", "Created"],
        [
            (r.release_tag, r.runtime, r.version, r.created_at.strftime("%Y-%m-%d %H:%M"))
            for r in releases
        ],
    )
    click.echo(click.style(f"\n{len(releases)} release(s)", fg="green"))
