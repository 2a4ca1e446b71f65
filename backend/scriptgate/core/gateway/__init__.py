"""
Gateway: configuration loader, resolver, script cache, runner, request/response.
"""

from scriptgate.core.gateway.config_loader import (
    ConfigError,
    DuplicateRouteError,
    GatewayConfig,
    Route,
    load_config,
    load_config_file,
    parse_address,
)
from scriptgate.core.gateway.request_response import (
    not_found_response,
    request_context_from_starlette,
    to_http_response,
)
from scriptgate.core.gateway.resolver import Router
from scriptgate.core.gateway.runner import PipelineExecutor, PipelineOutcome, PipelineState
from scriptgate.core.gateway.script_cache import ScriptRegistry, make_file_reader

__all__ = [
    "ConfigError",
    "DuplicateRouteError",
    "GatewayConfig",
    "PipelineExecutor",
    "PipelineOutcome",
    "PipelineState",
    "Route",
    "Router",
    "ScriptRegistry",
    "load_config",
    "load_config_file",
    "make_file_reader",
    "not_found_response",
    "parse_address",
    "request_context_from_starlette",
    "to_http_response",
]
