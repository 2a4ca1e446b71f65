"""Tests for the scriptgate command line."""

from pathlib import Path
from unittest.mock import patch

import pytest

from scriptgate.cli import build_parser, main


def _args(repo_root: Path, *extra: str) -> list[str]:
    return [
        "--config",
        str(repo_root / "config.py"),
        "--scripts-dir",
        str(repo_root / "scripts"),
        *extra,
    ]


def test_parser_defaults() -> None:
    args = build_parser().parse_args([])
    assert args.address is None
    assert args.config == "config.py"
    assert args.scripts_dir == "scripts"
    assert args.check is False


def test_check_ok(repo_root: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(_args(repo_root, "--check")) == 0
    out = capsys.readouterr().out
    assert "/ -> default_api.py" in out
    assert "/api/users -> user_api.py" in out
    assert "OK: 2 route(s), address localhost:9000" in out


def test_check_with_address_override(repo_root: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(_args(repo_root, "127.0.0.1:7000", "--check")) == 0
    assert "address 127.0.0.1:7000" in capsys.readouterr().out


def test_invalid_address_override(repo_root: Path) -> None:
    assert main(_args(repo_root, "not-an-address", "--check")) == 1


def test_missing_config(tmp_path: Path) -> None:
    assert main(["--config", str(tmp_path / "nope.py"), "--check"]) == 1


def test_broken_script_fails_check(tmp_path: Path) -> None:
    (tmp_path / "bad.py").write_text("def middleware(request, response):\n    pass\n")
    conf = tmp_path / "config.py"
    conf.write_text('SERVER_ADDR = "localhost:9000"\nrouter.add("/", "bad.py")\n')
    assert main(["--config", str(conf), "--scripts-dir", str(tmp_path), "--check"]) == 1


def test_serve(repo_root: Path) -> None:
    with patch("scriptgate.cli.uvicorn.run") as run:
        assert main(_args(repo_root, "0.0.0.0:8123")) == 0
    run.assert_called_once()
    _, kwargs = run.call_args
    assert kwargs["host"] == "0.0.0.0"
    assert kwargs["port"] == 8123
    app = run.call_args.args[0]
    assert app.state.address == "0.0.0.0:8123"
