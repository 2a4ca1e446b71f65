"""
Gateway runner: the per-request pipeline.

    INIT -> MIDDLEWARE -> INTERCEPT_CHECK -> HANDLER -> HOOK -> DONE

- middleware (optional) runs first against the shared ResponseContext.
- handler runs only if response.status is still exactly 200 afterwards;
  any other status means middleware intercepted the request.
- response_hook (optional) runs after every outcome, including failures.

A middleware/handler failure becomes a 500 (or keeps a non-200 status the
stage had already set) and the hook still runs. A hook failure is logged and
its partial mutations are rolled back.
"""

import json
import logging
from dataclasses import dataclass, field
from enum import Enum

from scriptgate.core.gateway.script_cache import ScriptRegistry
from scriptgate.engines.script import (
    HookError,
    LoadError,
    RequestContext,
    ResponseContext,
    ScriptEnvironment,
    ScriptModule,
    Stage,
    StageError,
    StageSet,
)
from scriptgate.engines.script.context import DEFAULT_STATUS

logger = logging.getLogger(__name__)


class PipelineState(str, Enum):
    INIT = "init"
    MIDDLEWARE = "middleware"
    INTERCEPT_CHECK = "intercept_check"
    HANDLER = "handler"
    HOOK = "hook"
    DONE = "done"


@dataclass
class PipelineOutcome:
    response: ResponseContext
    stages_run: list[Stage] = field(default_factory=list)
    states: list[PipelineState] = field(default_factory=list)
    intercepted: bool = False
    failed_stage: Stage | None = None
    hook_failed: bool = False
    load_error: LoadError | None = None


def error_body(exc: Exception, *, expose: bool) -> str:
    detail = "Internal server error"
    if expose:
        detail = f"Internal server error: {exc}"
    return json.dumps({"detail": detail})


def _apply_stage_failure(response: ResponseContext, exc: StageError, *, expose: bool) -> None:
    """Keep a valid non-200 status the stage set before failing; otherwise 500 + diagnostic."""
    s = response.status
    kept = (
        isinstance(s, int)
        and not isinstance(s, bool)
        and 100 <= s <= 599
        and s != DEFAULT_STATUS
    )
    if kept:
        # a stage may have broken headers/body before failing; reset what's invalid
        if not isinstance(response.headers, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in response.headers.items()
        ):
            response.headers = {}
        if not isinstance(response.body, str):
            response.body = ""
        return
    response.status = 500
    response.headers = {"Content-Type": "application/json"}
    response.body = error_body(exc, expose=expose)


class PipelineExecutor:
    """
    Drives the three stages of one script module for one request.
    Holds no per-request state, so a single instance serves all threads.
    """

    def __init__(
        self,
        registry: ScriptRegistry,
        environment: ScriptEnvironment,
        *,
        expose_errors: bool = False,
    ) -> None:
        self._registry = registry
        self._env = environment
        self._expose = expose_errors

    def run(self, script_id: str, request: RequestContext) -> PipelineOutcome:
        """Load (or fetch cached) module for script_id and execute the pipeline."""
        try:
            module = self._registry.get(script_id)
        except LoadError as e:
            logger.error("Pipeline aborted for %s: %s", request.path, e)
            response = ResponseContext(
                status=500,
                headers={"Content-Type": "application/json"},
                body=error_body(e, expose=self._expose),
            )
            return PipelineOutcome(
                response=response,
                states=[PipelineState.INIT, PipelineState.DONE],
                load_error=e,
            )
        return self.execute(module, request)

    def execute(self, module: ScriptModule, request: RequestContext) -> PipelineOutcome:
        response = ResponseContext()
        outcome = PipelineOutcome(response=response, states=[PipelineState.INIT])
        log_extra = {"route": request.path}

        try:
            stages = self._env.materialize(module, log_extra=log_extra)
        except LoadError as e:
            logger.error("Pipeline aborted for %s: %s", request.path, e)
            response.status = 500
            response.headers = {"Content-Type": "application/json"}
            response.body = error_body(e, expose=self._expose)
            outcome.load_error = e
            outcome.states.append(PipelineState.DONE)
            return outcome

        # MIDDLEWARE
        if stages.middleware is not None:
            outcome.states.append(PipelineState.MIDDLEWARE)
            self._run_stage(stages, Stage.MIDDLEWARE, request, outcome)

        # INTERCEPT_CHECK: literal equality with the default, not "any 2xx"
        outcome.states.append(PipelineState.INTERCEPT_CHECK)
        if response.status == DEFAULT_STATUS:
            outcome.states.append(PipelineState.HANDLER)
            self._run_stage(stages, Stage.HANDLER, request, outcome)
        else:
            outcome.intercepted = outcome.failed_stage is None
            if outcome.intercepted:
                logger.info(
                    "Request %s %s intercepted by middleware (status: %s)",
                    request.method,
                    request.path,
                    response.status,
                )

        # HOOK
        if stages.response_hook is not None:
            outcome.states.append(PipelineState.HOOK)
            snap = response.snapshot()
            try:
                self._env.invoke(stages, Stage.RESPONSE_HOOK, request, response)
                outcome.stages_run.append(Stage.RESPONSE_HOOK)
            except HookError as e:
                outcome.stages_run.append(Stage.RESPONSE_HOOK)
                outcome.hook_failed = True
                response.restore(snap)
                logger.warning(
                    "Response hook error in %s for %s: %s",
                    module.script_id,
                    request.path,
                    e.message,
                    exc_info=e,
                )

        outcome.states.append(PipelineState.DONE)
        return outcome

    def _run_stage(
        self,
        stages: StageSet,
        stage: Stage,
        request: RequestContext,
        outcome: PipelineOutcome,
    ) -> None:
        try:
            self._env.invoke(stages, stage, request, outcome.response)
        except StageError as e:
            outcome.failed_stage = stage
            logger.warning(
                "%s error for %s: %s",
                stage.value.capitalize(),
                request.path,
                e.message,
                exc_info=e,
            )
            _apply_stage_failure(outcome.response, e, expose=self._expose)
        finally:
            outcome.stages_run.append(stage)
