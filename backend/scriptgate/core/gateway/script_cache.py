"""
Script module cache: ScriptId -> compiled ScriptModule, or a standing LoadError.

Entries are immutable once populated. Failed loads are cached too, so a broken
script answers 500 on every request without being re-read; call
``invalidate()`` after editing scripts to have them re-read on next use.
"""

import logging
import threading
from pathlib import Path
from typing import Callable

from scriptgate.engines.script import LoadError, ScriptEnvironment, ScriptModule

_LOG = logging.getLogger(__name__)

SourceReader = Callable[[str], str]


def make_file_reader(scripts_dir: str | Path) -> SourceReader:
    """Return read(script_id) -> source for files under scripts_dir."""
    base = Path(scripts_dir)

    def read(script_id: str) -> str:
        path = base / script_id
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise LoadError(script_id, f"cannot read {path}: {e}") from e

    return read


class ScriptRegistry:
    def __init__(self, environment: ScriptEnvironment, read_source: SourceReader) -> None:
        self._env = environment
        self._read = read_source
        self._cache: dict[str, ScriptModule | LoadError] = {}
        self._lock = threading.Lock()
        self.load_count = 0

    def _load(self, script_id: str) -> ScriptModule | LoadError:
        self.load_count += 1
        try:
            source = self._read(script_id)
            module = self._env.compile(source, script_id=script_id)
        except LoadError as e:
            _LOG.error("%s", e)
            return e
        _LOG.info("Loaded script %s", script_id)
        return module

    def get(self, script_id: str) -> ScriptModule:
        """Return the cached module, loading it on first use. Raises the (cached) LoadError."""
        entry = self._cache.get(script_id)
        if entry is None:
            with self._lock:
                entry = self._cache.get(script_id)
                if entry is None:
                    entry = self._load(script_id)
                    self._cache[script_id] = entry
        if isinstance(entry, LoadError):
            # fresh instance so tracebacks don't pile up on the cached one
            raise LoadError(entry.script_id, entry.reason)
        return entry

    def preload(self, script_ids: list[str]) -> None:
        """Load every script now; the first LoadError is raised (startup-fatal)."""
        for script_id in script_ids:
            self.get(script_id)

    def invalidate(self, script_id: str | None = None) -> None:
        """Drop one cached entry (or all) so it is re-read on next use."""
        with self._lock:
            if script_id is None:
                self._cache.clear()
            else:
                self._cache.pop(script_id, None)

    def is_loaded(self, script_id: str) -> bool:
        return isinstance(self._cache.get(script_id), ScriptModule)
