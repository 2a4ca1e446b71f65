"""
ScriptEnvironment: compile(source) -> ScriptModule; invoke(stages, stage, request, response).

A route script is Python source run in the RestrictedPython sandbox. It exports
up to three top-level functions, each called as ``fn(request, response)``:

    def middleware(request, response): ...     # optional
    def handler(request, response): ...        # required
    def response_hook(request, response): ...  # optional

The compiled code object is shared; every request gets its own namespace via
materialize(), so module-level script state never outlives one request.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from .context import RequestContext, ResponseContext
from .modules import make_env_module, make_log_module
from .sandbox import build_restricted_globals, compile_script

_log = logging.getLogger(__name__)

StageFn = Callable[[RequestContext, ResponseContext], Any]


class Stage(str, Enum):
    MIDDLEWARE = "middleware"
    HANDLER = "handler"
    RESPONSE_HOOK = "response_hook"


class LoadError(Exception):
    """Script source failed to compile/execute, or does not export a callable handler."""

    def __init__(self, script_id: str, reason: str) -> None:
        super().__init__(f"Failed to load script {script_id}: {reason}")
        self.script_id = script_id
        self.reason = reason


class StageError(Exception):
    """A stage raised, or left the response in an invalid shape."""

    def __init__(self, stage: Stage, message: str) -> None:
        super().__init__(f"{stage.value} failed: {message}")
        self.stage = stage
        self.message = message


class HookError(StageError):
    """Failure inside response_hook; logged and never shown to the client."""


@dataclass(frozen=True)
class ScriptModule:
    script_id: str
    code: Any
    stages: frozenset[Stage]

    def exports(self, stage: Stage) -> bool:
        return stage in self.stages


@dataclass(frozen=True)
class StageSet:
    """Per-request callables of one script module; None means the stage is absent."""

    middleware: StageFn | None = None
    handler: StageFn | None = None
    response_hook: StageFn | None = None

    def get(self, stage: Stage) -> StageFn | None:
        return getattr(self, stage.value)


def _extract_stages(script_id: str, namespace: dict[str, Any]) -> StageSet:
    found: dict[str, StageFn | None] = {}
    for stage in Stage:
        fn = namespace.get(stage.value)
        if fn is not None and not callable(fn):
            raise LoadError(script_id, f"'{stage.value}' must be a function")
        found[stage.value] = fn
    if found[Stage.HANDLER.value] is None:
        raise LoadError(script_id, "script does not define handler(request, response)")
    return StageSet(**found)


class ScriptEnvironment:
    """
    Capability boundary around the sandbox. Stateless apart from the
    settings used to build the `env` helper, so one instance is shared by
    all request threads.
    """

    def __init__(self, *, settings: Any = None, logger: logging.Logger | None = None) -> None:
        self._script_logger = logger
        whitelist = getattr(settings, "script_env_whitelist", None) if settings is not None else None
        self._env = make_env_module(settings=settings, env_whitelist=whitelist)

    def _namespace(self, log_extra: dict[str, Any] | None) -> dict[str, Any]:
        log = make_log_module(logger_instance=self._script_logger, extra=log_extra)
        return build_restricted_globals(
            {
                "log": log,
                "env": self._env,
                "_print_": log.printer_factory(),
            }
        )

    def _exec(self, code: Any, log_extra: dict[str, Any] | None) -> dict[str, Any]:
        g = self._namespace(log_extra)
        exec(code, g)  # noqa: S102 - RestrictedPython compiled code
        return g

    def compile(self, source: str, *, script_id: str = "<script>") -> ScriptModule:
        """
        Compile source and execute its top level once to check the exports.
        Raises LoadError on syntax/policy errors, top-level failures, or a missing handler.
        """
        try:
            code = compile_script(source, filename=script_id)
        except SyntaxError as e:
            raise LoadError(script_id, f"compile failed: {e}") from e
        try:
            g = self._exec(code, {"script": script_id})
        except Exception as e:
            raise LoadError(script_id, f"top-level code raised {type(e).__name__}: {e}") from e
        stages = _extract_stages(script_id, g)
        present = frozenset(s for s in Stage if stages.get(s) is not None)
        _log.debug("Compiled %s (stages: %s)", script_id, sorted(s.value for s in present))
        return ScriptModule(script_id=script_id, code=code, stages=present)

    def materialize(
        self, module: ScriptModule, *, log_extra: dict[str, Any] | None = None
    ) -> StageSet:
        """Execute the module in a fresh namespace and return its stage callables."""
        extra = {"script": module.script_id, **(log_extra or {})}
        try:
            g = self._exec(module.code, extra)
        except Exception as e:
            raise LoadError(module.script_id, f"top-level code raised {type(e).__name__}: {e}") from e
        return _extract_stages(module.script_id, g)

    def invoke(
        self,
        stages: StageSet,
        stage: Stage,
        request: RequestContext,
        response: ResponseContext,
    ) -> bool:
        """
        Run one stage. Returns False when the module does not export it.
        Raises StageError (HookError for response_hook) when the stage raises
        or leaves response with a wrong shape.
        """
        fn = stages.get(stage)
        if fn is None:
            return False
        error_cls = HookError if stage is Stage.RESPONSE_HOOK else StageError
        try:
            fn(request, response)
        except Exception as e:
            raise error_cls(stage, f"{type(e).__name__}: {e}") from e
        try:
            response.validate()
        except ValueError as e:
            raise error_cls(stage, str(e)) from e
        return True
