"""
Request/response views handed to route script stages.

RequestContext is frozen and its headers are an immutable, case-insensitive
Starlette ``Headers``: script writes to it are rejected by the sandbox write
guard (and would fail on the objects themselves anyway).

ResponseContext is the single mutable object of a request. It opts in to
sandbox attribute writes via ``_guarded_writes`` and exposes exactly
``status``, ``headers`` and ``body``.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from starlette.datastructures import Headers

DEFAULT_STATUS = 200


@dataclass(frozen=True)
class RequestContext:
    method: str
    path: str
    headers: Headers = field(default_factory=Headers)
    body: str = ""

    @classmethod
    def build(
        cls,
        method: str,
        path: str,
        headers: Mapping[str, str] | Iterable[tuple[str, str]] | None = None,
        body: str = "",
    ) -> "RequestContext":
        """Build from plain values; header order is kept, lookups ignore case."""
        if isinstance(headers, Headers):
            h = headers
        elif headers is None:
            h = Headers()
        else:
            pairs = headers.items() if isinstance(headers, Mapping) else headers
            h = Headers(
                raw=[
                    (str(k).lower().encode("latin-1"), str(v).encode("latin-1"))
                    for k, v in pairs
                ]
            )
        return cls(method=method.upper(), path=path, headers=h, body=body or "")


class ResponseContext:
    """Mutable response builder: status (default 200), headers, body."""

    __slots__ = ("status", "headers", "body")

    # RestrictedPython full_write_guard lets scripts assign attributes
    _guarded_writes = True

    def __init__(
        self,
        status: int = DEFAULT_STATUS,
        headers: dict[str, str] | None = None,
        body: str = "",
    ) -> None:
        self.status = status
        self.headers = dict(headers or {})
        self.body = body

    def __repr__(self) -> str:
        return f"ResponseContext(status={self.status!r}, headers={self.headers!r}, body={self.body!r})"

    def snapshot(self) -> tuple[Any, dict[str, Any], Any]:
        headers = dict(self.headers) if isinstance(self.headers, dict) else self.headers
        return (self.status, headers, self.body)

    def restore(self, snap: tuple[Any, dict[str, Any], Any]) -> None:
        """Put a snapshot back into this same instance."""
        self.status, headers, self.body = snap
        self.headers = dict(headers) if isinstance(headers, dict) else headers

    def validate(self) -> None:
        """Raise ValueError unless status/headers/body have the fixed shape."""
        s = self.status
        if isinstance(s, bool) or not isinstance(s, int):
            raise ValueError(f"response.status must be an int, got {type(s).__name__}")
        if not 100 <= s <= 599:
            raise ValueError(f"response.status out of range: {s}")
        if not isinstance(self.headers, dict):
            raise ValueError(
                f"response.headers must be a dict, got {type(self.headers).__name__}"
            )
        for k, v in self.headers.items():
            if not isinstance(k, str) or not isinstance(v, str):
                raise ValueError(f"response header {k!r} must map str to str")
        if not isinstance(self.body, str):
            raise ValueError(f"response.body must be a str, got {type(self.body).__name__}")
