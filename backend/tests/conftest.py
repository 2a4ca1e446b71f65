from collections.abc import Callable
from pathlib import Path

import pytest

from scriptgate.core.config import Settings
from scriptgate.core.gateway import PipelineExecutor, ScriptRegistry
from scriptgate.engines.script import RequestContext, ScriptEnvironment
from tests.utils.scripts import CountingReader

REPO_ROOT = Path(__file__).resolve().parents[2]


@pytest.fixture
def repo_root() -> Path:
    return REPO_ROOT


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        ENVIRONMENT="local",
        CONFIG_FILE=str(REPO_ROOT / "config.py"),
        SCRIPTS_DIR=str(REPO_ROOT / "scripts"),
        SCRIPT_EAGER_LOAD=True,
        SCRIPT_ENV_WHITELIST="PROJECT_NAME,ENVIRONMENT",
    )


@pytest.fixture
def environment(test_settings: Settings) -> ScriptEnvironment:
    return ScriptEnvironment(settings=test_settings)


@pytest.fixture
def make_executor(
    environment: ScriptEnvironment,
) -> Callable[..., tuple[PipelineExecutor, ScriptRegistry, CountingReader]]:
    """Build executor + registry over in-memory sources."""

    def _make(
        sources: dict[str, str], *, expose_errors: bool = True
    ) -> tuple[PipelineExecutor, ScriptRegistry, CountingReader]:
        reader = CountingReader(sources)
        registry = ScriptRegistry(environment, reader)
        executor = PipelineExecutor(registry, environment, expose_errors=expose_errors)
        return executor, registry, reader

    return _make


@pytest.fixture
def get_request() -> RequestContext:
    return RequestContext.build("GET", "/probe", {"Accept": "*/*"})
