"""
scriptgate command line.

Usage:
  scriptgate [ADDRESS] [--config FILE] [--scripts-dir DIR] [--check]

ADDRESS (host:port) overrides SERVER_ADDR from the configuration file.
--check loads the configuration, compiles every routed script and exits.
"""

import argparse
import logging
import sys
from collections.abc import Sequence

import uvicorn

from scriptgate.core.config import settings
from scriptgate.core.gateway import ConfigError, load_config_file, parse_address
from scriptgate.engines.script import LoadError
from scriptgate.main import create_app

_log = logging.getLogger("scriptgate")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scriptgate",
        description="HTTP dispatcher running sandboxed Python route scripts.",
    )
    parser.add_argument(
        "address",
        nargs="?",
        default=None,
        help="host:port to listen on (overrides SERVER_ADDR in the config file)",
    )
    parser.add_argument(
        "--config",
        default=settings.CONFIG_FILE,
        help=f"route configuration script (default: {settings.CONFIG_FILE})",
    )
    parser.add_argument(
        "--scripts-dir",
        default=settings.SCRIPTS_DIR,
        help=f"directory holding route scripts (default: {settings.SCRIPTS_DIR})",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="load the configuration and compile all scripts, then exit",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    cfg = settings.model_copy(
        update={"CONFIG_FILE": args.config, "SCRIPTS_DIR": args.scripts_dir}
    )
    if args.check:
        cfg = cfg.model_copy(update={"SCRIPT_EAGER_LOAD": True})

    _log.info("Server starting up...")
    try:
        gateway = load_config_file(
            cfg.CONFIG_FILE,
            scripts_dir=cfg.SCRIPTS_DIR,
            address_override=args.address,
        )
        host, port = parse_address(gateway.address)
        app = create_app(gateway, settings=cfg)
    except (ConfigError, LoadError) as e:
        _log.error("Failed to load configuration: %s", e)
        return 1

    if args.check:
        for route in gateway.routes:
            print(f"{route.path} -> {route.script_ref}")
        print(f"OK: {len(gateway.routes)} route(s), address {gateway.address}")
        return 0

    _log.info("Server running at http://%s", gateway.address)
    uvicorn.run(app, host=host, port=port, log_level=cfg.LOG_LEVEL.lower())
    return 0


if __name__ == "__main__":
    sys.exit(main())
