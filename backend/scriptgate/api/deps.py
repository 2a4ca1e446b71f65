from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Request

from scriptgate.core.gateway import PipelineExecutor, Router, ScriptRegistry


@dataclass(frozen=True)
class Gateway:
    """Per-app collaborators, built once in create_app and kept on app.state."""

    router: Router
    registry: ScriptRegistry
    executor: PipelineExecutor


def get_gateway(request: Request) -> Gateway:
    return request.app.state.gateway


GatewayDep = Annotated[Gateway, Depends(get_gateway)]
