import logging
from pathlib import Path

import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from scriptgate.api.deps import Gateway
from scriptgate.api.routes.gateway import router as gateway_router
from scriptgate.core.config import Settings
from scriptgate.core.config import settings as default_settings
from scriptgate.core.gateway import (
    GatewayConfig,
    PipelineExecutor,
    Router,
    ScriptRegistry,
    make_file_reader,
)
from scriptgate.engines.script import ScriptEnvironment

_logger = logging.getLogger(__name__)


def create_app(
    gateway: GatewayConfig,
    *,
    settings: Settings | None = None,
    registry: ScriptRegistry | None = None,
) -> FastAPI:
    """
    Build the FastAPI app for one loaded GatewayConfig.

    Scripts are read from settings.SCRIPTS_DIR unless a registry is supplied.
    With SCRIPT_EAGER_LOAD every routed script is compiled here and a
    LoadError propagates (startup-fatal).
    """
    cfg = settings or default_settings

    if cfg.SENTRY_DSN and cfg.ENVIRONMENT != "local":
        sentry_sdk.init(dsn=str(cfg.SENTRY_DSN), enable_tracing=True)

    environment = ScriptEnvironment(settings=cfg)
    if registry is None:
        registry = ScriptRegistry(environment, make_file_reader(Path(cfg.SCRIPTS_DIR)))
    router = Router(gateway.routes)
    _logger.info("Registered routes: %s", router.paths)

    if cfg.SCRIPT_EAGER_LOAD:
        registry.preload(router.script_refs)

    executor = PipelineExecutor(registry, environment, expose_errors=cfg.expose_errors)

    # Every path belongs to the route table: no docs/openapi routes
    app = FastAPI(
        title=cfg.PROJECT_NAME,
        openapi_url=None,
        docs_url=None,
        redoc_url=None,
    )
    app.state.gateway = Gateway(router=router, registry=registry, executor=executor)
    app.state.address = gateway.address

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Log anything that escaped the gateway route and answer a JSON 500."""
        _logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        detail = "Internal server error"
        if cfg.expose_errors:
            detail = f"Internal server error: {exc}"
        return JSONResponse(status_code=500, content={"detail": detail})

    app.include_router(gateway_router)
    return app
