"""
Idempotent File Writer.

A file is (re)written only when it is absent or its content differs, so
regenerating from an unchanged snapshot leaves every modification time
untouched.
"""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import Union

from ..faults import OutputDirectoryFault, SiteWriteFault

logger = logging.getLogger("runtimedist.sitegen.writer")

# Below this size equal-length content is compared byte for byte.
DIRECT_COMPARE_THRESHOLD = 1024


def content_matches(a: bytes, b: bytes) -> bool:
    if len(a) != len(b):
        return False
    if len(a) < DIRECT_COMPARE_THRESHOLD:
        return a == b
    return hashlib.sha256(a).digest() == hashlib.sha256(b).digest()


def ensure_directory(path: Union[str, Path]) -> Path:
    """``mkdir -p``; raises :class:`OutputDirectoryFault` on failure."""
    path = Path(path)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise OutputDirectoryFault(str(path), str(exc)) from exc
    return path


class SiteWriter:
    """
    Writes rendered pages, skipping unchanged content.

    In dry-run mode nothing touches the filesystem; ``written`` then
    counts the writes that *would* have happened.
    """

    def __init__(self, dry_run: bool = False):
        self.dry_run = dry_run
        self.written = 0
        self.unchanged = 0

    def write(self, path: Union[str, Path], content: Union[str, bytes]) -> bool:
        """
        Write *content* to *path* if it changed.

        Returns:
            True if the file was (or in dry-run would be) written.

        Raises:
            OutputDirectoryFault: If the parent directory cannot be created.
            SiteWriteFault: If the file cannot be written.
        """
        path = Path(path)
        data = content.encode("utf-8") if isinstance(content, str) else content

        if not self.dry_run:
            ensure_directory(path.parent)

        try:
            existing = path.read_bytes()
        except FileNotFoundError:
            existing = None
        except OSError as exc:
            raise SiteWriteFault(str(path), str(exc)) from exc

        if existing is not None and content_matches(existing, data):
            self.unchanged += 1
            logger.debug("Unchanged, skipping: %s", path)
            return False

        self.written += 1
        if self.dry_run:
            logger.debug("Would write: %s", path)
            return True

        tmp = path.with_name(path.name + ".tmp")
        try:
            tmp.write_bytes(data)
            tmp.replace(path)  # atomic on POSIX
        except OSError as exc:
            if tmp.exists():
                tmp.unlink()
            raise SiteWriteFault(str(path), str(exc)) from exc

        logger.debug("Wrote: %s", path)
        return True
