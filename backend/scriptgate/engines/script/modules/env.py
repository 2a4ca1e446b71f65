"""
Env module for route scripts: get, get_int, get_bool, keys.

Values come from Settings first, then os.environ, and only for keys listed
in SCRIPT_ENV_WHITELIST so scripts cannot read secrets such as SENTRY_DSN.
"""

import os
from typing import Any

_TRUE_STRINGS = frozenset({"true", "1", "yes", "on"})


class _EnvModule:
    """Read-only view of whitelisted configuration values."""

    __slots__ = ("_settings", "_whitelist")

    def __init__(self, *, settings: Any, whitelist: frozenset[str]) -> None:
        self._settings = settings
        self._whitelist = whitelist

    def _raw(self, key: str) -> Any:
        if key not in self._whitelist:
            return None
        if isinstance(self._settings, dict):
            v = self._settings.get(key)
        else:
            v = getattr(self._settings, key, None)
        return v if v is not None else os.environ.get(key)

    def get(self, key: str, default: Any = None) -> Any:
        v = self._raw(key)
        return default if v is None else v

    def get_int(self, key: str, default: int = 0) -> int:
        try:
            return int(self._raw(key))
        except (TypeError, ValueError):
            return default

    def get_bool(self, key: str, default: bool = False) -> bool:
        v = self._raw(key)
        if v is None:
            return default
        if isinstance(v, bool):
            return v
        return str(v).strip().lower() in _TRUE_STRINGS

    def keys(self) -> list[str]:
        return sorted(self._whitelist)


def make_env_module(
    *,
    settings: Any = None,
    env_whitelist: frozenset[str] | set[str] | None = None,
) -> _EnvModule:
    """Build the ``env`` object. An empty or missing whitelist exposes nothing."""
    return _EnvModule(
        settings=settings if settings is not None else {},
        whitelist=frozenset(env_whitelist or ()),
    )
