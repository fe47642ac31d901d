"""
Site Resources — page templates and static assets.

Templates and assets are loaded once per process by
:func:`get_site_resources` and passed by reference into the renderers.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jinja2 import Environment, PackageLoader, StrictUndefined, select_autoescape

from ..faults import RenderFault

_PACKAGE_DIR = Path(__file__).parent
STYLESHEET_PATH = _PACKAGE_DIR / "assets" / "style.css"


def format_bytes(size: int) -> str:
    """
    Human-readable binary-prefix size.

    >>> format_bytes(1023)
    '1023 B'
    >>> format_bytes(1536)
    '1.5 KB'
    """
    unit = 1024
    if size < unit:
        return f"{size} B"
    div, exp = unit, 0
    n = size // unit
    while n >= unit:
        div *= unit
        exp += 1
        n //= unit
    return f"{size / div:.1f} {'KMGTPE'[exp]}B"


def create_environment() -> Environment:
    env = Environment(
        loader=PackageLoader("runtimedist.sitegen", "templates"),
        autoescape=select_autoescape(
            enabled_extensions=["html", "htm", "xml"],
            default_for_string=True,
        ),
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["format_bytes"] = format_bytes
    return env


@dataclass(frozen=True)
class SiteResources:
    """Immutable bundle shared by every renderer of a run."""

    env: Environment
    stylesheet: bytes

    def render(self, template_name: str, **context: Any) -> str:
        return self.env.get_template(template_name).render(**context)


@functools.lru_cache(maxsize=1)
def get_site_resources() -> SiteResources:
    """
    Load templates and assets (first call only).

    Raises:
        RenderFault: If the packaged stylesheet is missing.
    """
    try:
        stylesheet = STYLESHEET_PATH.read_bytes()
    except OSError as exc:
        raise RenderFault("resources", f"cannot read {STYLESHEET_PATH.name}: {exc}") from exc
    return SiteResources(env=create_environment(), stylesheet=stylesheet)
