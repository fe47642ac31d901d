"""
Release Store — pluggable persistence for release rows.

Provides two implementations:

- **MemoryReleaseStore** — ephemeral, test-friendly
- **FilesystemReleaseStore** — persistent, one ``.release.json`` file per
  release tag inside a configurable directory

Both implement the two collaborator interfaces the pipeline consumes:

- ``ReleaseReader.get_all_releases()`` — full snapshot, newest first
- ``ReleaseWriter.create_release(release)`` — insert once, tags unique
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from ..faults import ArtifactsDocumentFault, ReleaseExistsFault, ReleaseStoreFault
from .core import Release

logger = logging.getLogger("runtimedist.releases.store")


# ── Abstract Protocol ───────────────────────────────────────────────────


class ReleaseReader:
    """Read side: the full current snapshot of persisted releases."""

    def get_all_releases(self) -> List[Release]:
        raise NotImplementedError


class ReleaseWriter:
    """Write side: record a release produced at publish time."""

    def create_release(self, release: Release) -> Release:
        raise NotImplementedError


def _newest_first(releases: List[Release]) -> List[Release]:
    ordered = sorted(releases, key=lambda r: r.release_tag)
    ordered.sort(key=lambda r: r.created_at, reverse=True)
    return ordered


# ── Memory Store ────────────────────────────────────────────────────────


class MemoryReleaseStore(ReleaseReader, ReleaseWriter):
    """
    Ephemeral in-memory release store.

    Useful for tests and dry runs.
    """

    __slots__ = ("_releases", "_next_id")

    def __init__(self, releases: Optional[List[Release]] = None) -> None:
        # key = release_tag
        self._releases: Dict[str, Release] = {}
        self._next_id = 1
        for release in releases or []:
            self.create_release(release)

    def create_release(self, release: Release) -> Release:
        if release is None:
            raise ReleaseStoreFault("create", "release cannot be None")
        if release.release_tag in self._releases:
            raise ReleaseExistsFault(release.release_tag)
        if release.id is None:
            release.id = self._next_id
        self._next_id = max(self._next_id, release.id) + 1
        self._releases[release.release_tag] = release
        return release

    def get_all_releases(self) -> List[Release]:
        return _newest_first(list(self._releases.values()))

    def get_release_by_tag(self, release_tag: str) -> Optional[Release]:
        return self._releases.get(release_tag)

    def get_releases_by_runtime(self, runtime: str) -> List[Release]:
        return [r for r in self.get_all_releases() if r.runtime == runtime]

    def __len__(self) -> int:
        return len(self._releases)

    def __iter__(self) -> Iterator[Release]:
        return iter(self.get_all_releases())

    def __contains__(self, release_tag: object) -> bool:
        return release_tag in self._releases


# ── Filesystem Store ────────────────────────────────────────────────────


class FilesystemReleaseStore(ReleaseReader, ReleaseWriter):
    """
    Persistent filesystem release store.

    Writes each release as a ``.release.json`` file::

        <root>/
          nodejs-v22.15.0-20251109T120000Z.release.json
          nodejs-multi-20251110T080000Z.release.json
          ...

    File names are sanitised (``/`` → ``_``, ``:`` → ``_``).
    """

    __slots__ = ("root",)

    SUFFIX = ".release.json"

    def __init__(self, root: str = "releases") -> None:
        self.root = Path(root)
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ReleaseStoreFault("open", f"{self.root}: {exc}") from exc

    # ── Helpers ──────────────────────────────────────────────────────

    @classmethod
    def _safe_filename(cls, release_tag: str) -> str:
        safe = release_tag.replace("/", "_").replace(":", "_").replace(" ", "_")
        return f"{safe}{cls.SUFFIX}"

    def _release_path(self, release_tag: str) -> Path:
        return self.root / self._safe_filename(release_tag)

    def _iter_files(self) -> Iterator[Path]:
        for f in sorted(self.root.iterdir()):
            if f.is_file() and f.name.endswith(self.SUFFIX):
                yield f

    # ── CRUD ─────────────────────────────────────────────────────────

    def create_release(self, release: Release) -> Release:
        if release is None:
            raise ReleaseStoreFault("create", "release cannot be None")
        path = self._release_path(release.release_tag)
        if path.exists():
            raise ReleaseExistsFault(release.release_tag)
        if release.id is None:
            release.id = len(self) + 1

        tmp = path.with_suffix(".tmp")
        try:
            tmp.write_text(json.dumps(release.to_dict(), indent=2), encoding="utf-8")
            tmp.replace(path)  # atomic on POSIX
        except OSError as exc:
            if tmp.exists():
                tmp.unlink()
            raise ReleaseStoreFault("create", f"{path}: {exc}") from exc
        logger.info("Saved release: %s → %s", release.release_tag, path)
        return release

    def get_all_releases(self) -> List[Release]:
        return _newest_first([self._read(f) for f in self._iter_files()])

    def get_release_by_tag(self, release_tag: str) -> Optional[Release]:
        path = self._release_path(release_tag)
        if not path.exists():
            return None
        return self._read(path)

    def get_releases_by_runtime(self, runtime: str) -> List[Release]:
        return [r for r in self.get_all_releases() if r.runtime == runtime]

    # ── Internal ─────────────────────────────────────────────────────

    @staticmethod
    def _read(path: Path) -> Release:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            return Release.from_dict(data)
        except (OSError, ValueError, KeyError, TypeError, ArtifactsDocumentFault) as exc:
            raise ReleaseStoreFault("read", f"corrupt release file {path}: {exc}") from exc

    def __len__(self) -> int:
        return sum(1 for _ in self._iter_files())

    def __iter__(self) -> Iterator[Release]:
        return iter(self.get_all_releases())

    def __contains__(self, release_tag: object) -> bool:
        return isinstance(release_tag, str) and self._release_path(release_tag).exists()


# ── Convenience alias ───────────────────────────────────────────────────


def ReleaseStore(root: str = "releases") -> FilesystemReleaseStore:
    """
    Convenience constructor — returns a :class:`FilesystemReleaseStore`.

    Use ``MemoryReleaseStore()`` for tests.
    """
    return FilesystemReleaseStore(root)
