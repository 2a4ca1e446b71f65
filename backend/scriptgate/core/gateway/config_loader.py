"""
Route configuration loader.

The configuration is a sandboxed Python script, e.g.::

    SERVER_ADDR = "localhost:9000"

    router.add("/", "default_api.py")
    router.add("/api/users", "user_api.py")

``router.set_addr("host:port")`` is accepted as an alternative to SERVER_ADDR;
the global wins when both are present. A positional CLI address overrides both.
"""

import logging
import re
from dataclasses import dataclass, replace
from pathlib import Path
from types import SimpleNamespace
from typing import Callable

from scriptgate.engines.script.sandbox import build_restricted_globals, compile_script

_log = logging.getLogger(__name__)

_ADDRESS_RE = re.compile(r"^(?P<host>\[[0-9A-Fa-f:.]+\]|[^:\s]+):(?P<port>\d{1,5})$")


class ConfigError(Exception):
    """Startup configuration is unreadable or invalid. Fatal."""


class DuplicateRouteError(ConfigError):
    """A path was registered twice; the first registration is kept."""

    def __init__(self, path: str, first: str, second: str) -> None:
        super().__init__(
            f"Duplicate route {path!r}: already registered to {first!r}, rejected {second!r}"
        )
        self.path = path


@dataclass(frozen=True)
class Route:
    path: str
    script_ref: str


@dataclass(frozen=True)
class GatewayConfig:
    address: str
    routes: tuple[Route, ...]

    def with_address(self, address: str) -> "GatewayConfig":
        return replace(self, address=address)


class _RouteCollector:
    """Backs the `router` object seen by the configuration script."""

    def __init__(self, script_exists: Callable[[str], bool] | None) -> None:
        self._script_exists = script_exists
        self.routes: list[Route] = []
        self._by_path: dict[str, str] = {}
        self.address: str | None = None

    def add(self, path: str, script: str) -> None:
        if not isinstance(path, str) or not path:
            raise ConfigError(f"router.add: path must be a non-empty string, got {path!r}")
        if not isinstance(script, str) or not script.strip():
            raise ConfigError(f"router.add: script must be a non-empty string, got {script!r}")
        script = script.strip()
        if path in self._by_path:
            raise DuplicateRouteError(path, self._by_path[path], script)
        if self._script_exists is not None and not self._script_exists(script):
            raise ConfigError(f"Handler script not found: {script}")
        _log.info("Registering route: %s -> %s", path, script)
        self._by_path[path] = script
        self.routes.append(Route(path=path, script_ref=script))

    def set_addr(self, address: str) -> None:
        if not isinstance(address, str) or not address.strip():
            raise ConfigError(f"router.set_addr: address must be a non-empty string, got {address!r}")
        self.address = address.strip()

    def namespace(self) -> SimpleNamespace:
        return SimpleNamespace(add=self.add, set_addr=self.set_addr)


def parse_address(address: str) -> tuple[str, int]:
    """Split "host:port" (IPv6 hosts in brackets). Raises ConfigError when malformed."""
    m = _ADDRESS_RE.match((address or "").strip())
    if not m:
        raise ConfigError(f"Invalid server address {address!r}; expected host:port")
    port = int(m.group("port"))
    if not 0 < port < 65536:
        raise ConfigError(f"Invalid port in server address {address!r}")
    return m.group("host").strip("[]"), port


def load_config(
    source: str,
    *,
    filename: str = "config.py",
    address_override: str | None = None,
    script_exists: Callable[[str], bool] | None = None,
) -> GatewayConfig:
    """
    Execute the configuration script and return the address and ordered routes.

    - address_override: CLI address; when set, the configured address is optional.
    - script_exists: optional check run at registration for every script reference.

    Raises ConfigError (DuplicateRouteError for a repeated path).
    """
    collector = _RouteCollector(script_exists)
    try:
        code = compile_script(source, filename=filename)
    except SyntaxError as e:
        raise ConfigError(f"Failed to compile {filename}: {e}") from e

    g = build_restricted_globals({"router": collector.namespace()})
    try:
        exec(code, g)  # noqa: S102 - RestrictedPython compiled code
    except ConfigError:
        raise
    except Exception as e:
        raise ConfigError(f"Failed to execute {filename}: {type(e).__name__}: {e}") from e

    configured = g.get("SERVER_ADDR")
    if configured is not None and not isinstance(configured, str):
        raise ConfigError(f"SERVER_ADDR must be a string, got {type(configured).__name__}")
    address = address_override or configured or collector.address
    if not address:
        raise ConfigError(f"{filename}: no server address (set SERVER_ADDR or call router.set_addr)")
    if address_override:
        _log.info("Server address set by CLI argument: %s", address_override)
    parse_address(address)

    if not collector.routes:
        raise ConfigError(f"{filename}: no routes registered (call router.add(path, script))")
    return GatewayConfig(address=address, routes=tuple(collector.routes))


def load_config_file(
    path: str | Path,
    *,
    scripts_dir: str | Path | None = None,
    address_override: str | None = None,
) -> GatewayConfig:
    """Read and load a configuration file. Script references are checked against scripts_dir when given."""
    p = Path(path)
    try:
        source = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read configuration {p}: {e}") from e

    script_exists = None
    if scripts_dir is not None:
        base = Path(scripts_dir)

        def script_exists(ref: str) -> bool:
            return (base / ref).is_file()

    return load_config(
        source,
        filename=p.name,
        address_override=address_override,
        script_exists=script_exists,
    )
