"""
Script engine (Python, RestrictedPython): sandbox, request/response views, environment.

Exports: ScriptEnvironment, ScriptModule, StageSet, Stage, RequestContext,
ResponseContext, LoadError, StageError, HookError, compile_script,
build_restricted_globals.
"""

from .context import RequestContext, ResponseContext
from .environment import (
    HookError,
    LoadError,
    ScriptEnvironment,
    ScriptModule,
    Stage,
    StageError,
    StageSet,
)
from .sandbox import build_restricted_globals, compile_script

__all__ = [
    "HookError",
    "LoadError",
    "RequestContext",
    "ResponseContext",
    "ScriptEnvironment",
    "ScriptModule",
    "Stage",
    "StageError",
    "StageSet",
    "build_restricted_globals",
    "compile_script",
]
