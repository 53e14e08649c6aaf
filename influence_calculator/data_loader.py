"""Utilities for reading the static influence datasets."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping

import requests

from .config import DATA_DIR, DATA_FILES, REQUEST_TIMEOUT
from .errors import DataLoadError

logger = logging.getLogger(__name__)


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


@dataclass(slots=True)
class DataLoader:
    """Reads JSON datasets from the data directory or from remote URLs.

    Each entry of ``sources`` is either a file name relative to
    ``data_dir``, an absolute path, or an ``http(s)`` URL.  Parsed results
    are cached per dataset name.
    """

    data_dir: Path = DATA_DIR
    sources: Mapping[str, str] = field(default_factory=lambda: DATA_FILES.copy())
    session: requests.Session | None = None
    _cache: Dict[str, Any] = field(init=False, repr=False, default_factory=dict)

    def fetch_json(self, name: str) -> Any:
        """Return the parsed JSON for ``name`` from the configured sources."""

        if name not in self.sources:
            raise KeyError(f"Unknown dataset: {name}")
        if name not in self._cache:
            source = str(self.sources[name])
            if _is_url(source):
                self._cache[name] = self._fetch_remote(source)
            else:
                self._cache[name] = self._read_file(Path(self.data_dir) / source)
            logger.debug("Loaded dataset %s from %s", name, source)
        return self._cache[name]

    def _fetch_remote(self, url: str) -> Any:
        session = self.session or requests.Session()
        try:
            response = session.get(url, timeout=REQUEST_TIMEOUT)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as exc:
            raise DataLoadError(f"Unable to fetch {url}: {exc}") from exc
        except ValueError as exc:
            raise DataLoadError(f"Invalid JSON from {url}: {exc}") from exc

    @staticmethod
    def _read_file(path: Path) -> Any:
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise DataLoadError(f"Data file not found: {path}") from exc
        except OSError as exc:
            raise DataLoadError(f"Unable to read data file: {path}") from exc
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise DataLoadError(f"Invalid JSON in {path}: {exc}") from exc
