"""Unit tests for gateway resolver: exact-match Router."""

from scriptgate.core.gateway import Route, Router


def _router() -> Router:
    return Router(
        [
            Route("/", "default_api.py"),
            Route("/api/users", "user_api.py"),
            Route("/api/admins", "user_api.py"),
        ]
    )


def test_resolve_exact() -> None:
    r = _router()
    assert r.resolve("/") == "default_api.py"
    assert r.resolve("/api/users") == "user_api.py"


def test_resolve_miss() -> None:
    r = _router()
    assert r.resolve("/nope") is None
    assert r.resolve("") is None


def test_resolve_no_trailing_slash_folding() -> None:
    r = _router()
    assert r.resolve("/api/users/") is None
    assert r.resolve("/api") is None


def test_resolve_no_prefix_match() -> None:
    r = _router()
    assert r.resolve("/api/users/42") is None


def test_resolve_case_sensitive() -> None:
    assert _router().resolve("/API/USERS") is None


def test_resolve_query_is_not_part_of_path() -> None:
    assert _router().resolve("/api/users?id=1") is None


def test_first_registration_wins() -> None:
    r = Router([Route("/a", "first.py"), Route("/a", "second.py")])
    assert r.resolve("/a") == "first.py"
    assert len(r) == 1


def test_paths_and_script_refs() -> None:
    r = _router()
    assert r.paths == ["/", "/api/users", "/api/admins"]
    assert r.script_refs == ["default_api.py", "user_api.py"]
    assert len(r) == 3


def test_empty_router() -> None:
    r = Router([])
    assert r.resolve("/") is None
    assert r.paths == []
