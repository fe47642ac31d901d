"""rtd CLI - Main Entry Point.

Commands:
    generate   - Render the static site from the release store
    classify   - Classify an artifact filename
    artifacts  - Build / inspect artifacts documents
    releases   - Query the release store
"""

import json
import logging
import sys
from typing import Optional

import click

from runtimedist import __version__
from . import __cli_name__
from .commands.artifacts import artifacts_group
from .commands.releases import releases_group
from .utils.colors import _ARROW, _CHECK, _CROSS, dim, error, kv, success, warning


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


class RtdGroup(click.Group):
    """Click group listing commands in aligned, coloured columns."""

    def format_commands(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        commands = []
        for subcommand in self.list_commands(ctx):
            cmd = self.get_command(ctx, subcommand)
            if cmd is None or cmd.hidden:
                continue
            commands.append((subcommand, cmd.get_short_help_str(limit=48)))

        if commands:
            with formatter.section(click.style("Commands", fg="cyan", bold=True)):
                max_len = max(len(c[0]) for c in commands) + 2
                for name, help_text in commands:
                    formatter.write(f"  {click.style(name.ljust(max_len), fg='green')} {help_text}\n")


@click.group(cls=RtdGroup)
@click.version_option(version=__version__, prog_name=__cli_name__)
@click.option('--verbose', '-v', is_flag=True, help='Verbose output (DEBUG logging)')
@click.pass_context
def cli(ctx, verbose: bool):
    """Publish verified runtime binaries as a static catalog.

    \b
    Quick start:
      rtd releases list --store releases
      rtd generate --store releases --out site
    """
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose


cli.add_command(artifacts_group)
cli.add_command(releases_group)


# ============================================================================
# Commands
# ============================================================================

@cli.command('generate')
@click.option('--store', 'store_dir', default=None, help='Release store directory')
@click.option('--out', 'output_dir', default=None, help='Output directory for the site')
@click.option('--dry-run', is_flag=True, help='Render without writing files')
@click.option('--log-level', default=None,
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False))
@click.option('--config', 'config_path', default=None, help='YAML config file')
@click.pass_context
def generate(ctx, store_dir: Optional[str], output_dir: Optional[str], dry_run: bool,
             log_level: Optional[str], config_path: Optional[str]):
    """
    Generate the human pages and the simple index.

    Examples:
      rtd generate --store releases --out site
      rtd generate --out site --dry-run
      RTD_SITEGEN__OUTPUT_DIR=public rtd generate
    """
    from runtimedist.config import ConfigLoader
    from runtimedist.faults import Fault
    from runtimedist.releases import FilesystemReleaseStore
    from runtimedist.sitegen import Generator, GenerateOptions

    overrides = {
        key: value
        for key, value in (
            ('store_dir', store_dir),
            ('output_dir', output_dir),
            ('dry_run', dry_run or None),
            ('log_level', log_level),
        )
        if value is not None
    }
    if ctx.obj.get('verbose'):
        overrides['log_level'] = 'DEBUG'

    try:
        config = ConfigLoader.load(path=config_path, overrides={'sitegen': overrides}).sitegen()
        configure_logging(config.log_level)

        result = Generator(FilesystemReleaseStore(config.store_dir)).generate(
            GenerateOptions(output_dir=config.output_dir, dry_run=config.dry_run),
        )
    except Fault as e:
        error(f"  {_CROSS} Generation failed: {e}")
        sys.exit(1)

    if result.releases == 0:
        warning(f"  No releases found in {config.store_dir}; nothing generated")
        return

    label = "Would write" if result.dry_run else "Written"
    success(f"  {_CHECK} Site generated {_ARROW} {config.output_dir}")
    kv("Releases", result.releases)
    kv("Runtimes", result.runtimes)
    kv(label, result.written)
    kv("Unchanged", result.unchanged)
    if result.dry_run:
        dim("  (dry run: no files were written)")


@cli.command('classify')
@click.argument('filename')
@click.option('--downloads', '-d', type=click.Path(exists=True, dir_okay=False),
              help='JSON list of authoritative download records')
@click.option('--json-output', '-j', is_flag=True, help='Output as JSON')
def classify(filename: str, downloads: Optional[str], json_output: bool):
    """
    Classify an artifact filename.

    Examples:
      rtd classify node-v22.15.0-linux-x64.tar.xz
      rtd classify node-v22.15.0-darwin-arm64.tar.gz.sig -d downloads.json
    """
    from runtimedist.artifacts import FileKind, classify_file
    from runtimedist.faults import Fault
    from .commands._inputs import load_download_records

    try:
        records = load_download_records(downloads)
    except Fault as e:
        error(f"  {_CROSS} {e}")
        sys.exit(1)

    result = classify_file(filename, records)
    if json_output:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    kv("File", result.filename)
    kv("Kind", result.kind.value)
    kv("Resolution", result.resolution.value)
    if not result.is_common and result.kind is not FileKind.UNKNOWN:
        kv("Platform", result.platform)
        kv("Version", result.version or "—")
    if result.degraded:
        warning("  ! coordinates are heuristic or missing")


def main():
    """Entry point for `rtd` command."""
    cli(obj={})


if __name__ == '__main__':
    main()
