"""
Gateway request/response marshaling between Starlette and the script views.

- request_context_from_starlette: method, url.path (no query string), headers
  in arrival order, body decoded as UTF-8 (invalid bytes replaced).
- to_http_response: ResponseContext -> starlette Response. Headers with an
  invalid name, CR/LF or non-latin-1 characters in the value are skipped
  with a warning.
"""

import logging
import re

from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response

from scriptgate.engines.script import RequestContext, ResponseContext

_log = logging.getLogger(__name__)

# RFC 9110 token
_HEADER_NAME_RE = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")


async def request_context_from_starlette(request: Request) -> RequestContext:
    raw = await request.body()
    return RequestContext(
        method=request.method.upper(),
        path=request.url.path,
        headers=request.headers,
        body=raw.decode("utf-8", errors="replace"),
    )


def is_valid_header(name: str, value: str) -> bool:
    if not _HEADER_NAME_RE.fullmatch(name):
        return False
    if "\r" in value or "\n" in value:
        return False
    # starlette encodes header values as latin-1
    try:
        value.encode("latin-1")
    except UnicodeEncodeError:
        return False
    return True


def to_http_response(response: ResponseContext) -> Response:
    headers: dict[str, str] = {}
    for key, value in response.headers.items():
        if is_valid_header(key, value):
            headers[key] = value
        else:
            _log.warning("Invalid header skipped: %r: %r", key, value)
    return Response(content=response.body, status_code=response.status, headers=headers)


def not_found_response() -> Response:
    return PlainTextResponse("404 Not Found", status_code=404)
