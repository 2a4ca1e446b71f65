"""
Gateway: catch-all /{path:path}.

Flow: resolve (exact path) -> 404 or run pipeline -> serialize ResponseContext.
The pipeline is sync/blocking; run it in a thread so the event loop keeps
accepting concurrent requests.
"""

import asyncio
import logging

from fastapi import APIRouter, Request
from starlette.responses import Response

from scriptgate.api.deps import GatewayDep
from scriptgate.core.gateway import (
    not_found_response,
    request_context_from_starlette,
    to_http_response,
)

_log = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["gateway"], include_in_schema=False)


@router.api_route(
    "/{path:path}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"],
)
async def gateway_dispatch(path: str, request: Request, gateway: GatewayDep) -> Response:  # noqa: ARG001
    """Dispatch to the route script registered for the exact request path; 404 if none."""
    ctx = await request_context_from_starlette(request)
    script_id = gateway.router.resolve(ctx.path)
    if script_id is None:
        _log.warning("404 Not Found: %s", ctx.path)
        return not_found_response()

    outcome = await asyncio.to_thread(gateway.executor.run, script_id, ctx)
    _log.info(
        "%s %s -> %s (%s) status=%s",
        ctx.method,
        ctx.path,
        script_id,
        ",".join(s.value for s in outcome.stages_run) or "-",
        outcome.response.status,
    )
    return to_http_response(outcome.response)
