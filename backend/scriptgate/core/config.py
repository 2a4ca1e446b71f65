from typing import Literal

from pydantic import HttpUrl, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


def parse_csv(v: str | None) -> frozenset[str]:
    return frozenset(s.strip() for s in (v or "").split(",") if s.strip())


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    PROJECT_NAME: str = "scriptgate"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: str = "INFO"
    SENTRY_DSN: HttpUrl | None = None

    # Route configuration script and the directory route scripts are read from
    CONFIG_FILE: str = "config.py"
    SCRIPTS_DIR: str = "scripts"

    # Compile every routed script at startup; a broken script aborts startup.
    # When False, scripts are compiled on first request and failures are cached.
    SCRIPT_EAGER_LOAD: bool = True

    # Comma-separated keys readable by scripts through env.get()
    SCRIPT_ENV_WHITELIST: str = "PROJECT_NAME,ENVIRONMENT"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def script_env_whitelist(self) -> frozenset[str]:
        return parse_csv(self.SCRIPT_ENV_WHITELIST)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def expose_errors(self) -> bool:
        """Include exception messages in 500 bodies (local only)."""
        return self.ENVIRONMENT == "local"


settings = Settings()
