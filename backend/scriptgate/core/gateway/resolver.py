"""
Gateway resolver: exact-match route table built once from GatewayConfig.

No path parameters, no wildcards, no trailing-slash folding: "/api/users"
and "/api/users/" are different routes. A miss returns None; the HTTP layer
answers 404 without touching any script.
"""

import logging
from collections.abc import Iterable

from scriptgate.core.gateway.config_loader import Route

_log = logging.getLogger(__name__)


class Router:
    __slots__ = ("_table",)

    def __init__(self, routes: Iterable[Route]) -> None:
        table: dict[str, str] = {}
        for route in routes:
            # ConfigLoader already rejects duplicates; keep the first if one slips through
            table.setdefault(route.path, route.script_ref)
        self._table = table

    def resolve(self, path: str) -> str | None:
        """Return the script reference registered for path, or None."""
        return self._table.get(path)

    @property
    def paths(self) -> list[str]:
        return list(self._table)

    @property
    def script_refs(self) -> list[str]:
        """Distinct script references in registration order."""
        return list(dict.fromkeys(self._table.values()))

    def __len__(self) -> int:
        return len(self._table)
