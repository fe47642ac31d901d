"""Shared loaders for JSON input files passed on the command line."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Optional

from runtimedist.artifacts import DownloadRecord
from runtimedist.faults import ConfigInvalidFault


def read_json(path: str) -> Any:
    try:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    except ValueError as exc:
        raise ConfigInvalidFault(path, f"malformed JSON: {exc}") from exc


def load_download_records(path: Optional[str]) -> List[DownloadRecord]:
    """A JSON list of download records (``os``, ``arch``, ``version``, ``path``, …)."""
    if not path:
        return []
    data = read_json(path)
    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise ConfigInvalidFault(path, "expected a list of download records")
    return [DownloadRecord.from_dict(item) for item in data]
