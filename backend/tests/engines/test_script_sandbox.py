"""Unit tests for engines.script.sandbox."""

import pytest

from scriptgate.engines.script.sandbox import build_restricted_globals, compile_script


def _run(source: str, context: dict | None = None) -> dict:
    g = build_restricted_globals(context or {})
    exec(compile_script(source), g)
    return g


class TestCompileScript:
    def test_compile_simple(self) -> None:
        code = compile_script("x = 1")
        assert code is not None

    def test_compile_function_def(self) -> None:
        code = compile_script("def handler(request, response):\n    pass\n")
        assert code is not None

    def test_compile_syntax_error(self) -> None:
        with pytest.raises(SyntaxError):
            compile_script("def f(  ")

    def test_underscore_names_rejected(self) -> None:
        with pytest.raises(SyntaxError):
            compile_script("x = object.__subclasses__()")


class TestBuildRestrictedGlobals:
    def test_includes_builtins_and_guards(self) -> None:
        g = build_restricted_globals({})
        for name in ("__builtins__", "_getattr_", "_getiter_", "_write_", "_unpack_sequence_", "_inplacevar_"):
            assert name in g
        assert "json" in g
        assert "datetime" in g

    def test_merges_context(self) -> None:
        g = build_restricted_globals({"log": "log_obj", "request": {"a": 1}})
        assert g["log"] == "log_obj"
        assert g["request"] == {"a": 1}

    def test_fresh_dict_each_call(self) -> None:
        a = build_restricted_globals({})
        b = build_restricted_globals({})
        a["x"] = 1
        assert "x" not in b


class TestGuards:
    def test_open_blocked(self) -> None:
        with pytest.raises(NameError, match="open"):
            _run("result = open('/etc/passwd')")

    def test_import_blocked(self) -> None:
        with pytest.raises(ImportError):
            _run("import os")

    def test_tuple_unpacking(self) -> None:
        g = _run("a, b = [1, 2]\nfor k, v in [('x', 1)]:\n    pair = k + str(v)\n")
        assert g["a"] == 1 and g["b"] == 2
        assert g["pair"] == "x1"

    def test_inplace_add(self) -> None:
        g = _run("total = 1\ntotal += 2\n")
        assert g["total"] == 3

    def test_dict_item_write_allowed(self) -> None:
        g = _run("d = {}\nd['k'] = 'v'\n")
        assert g["d"] == {"k": "v"}

    def test_attribute_write_on_plain_object_rejected(self) -> None:
        class Plain:
            value = 1

        with pytest.raises(TypeError):
            _run("obj.value = 2", {"obj": Plain()})

    def test_json_available(self) -> None:
        g = _run("out = json.dumps({'error': 'Unauthorized'})")
        assert g["out"] == '{"error": "Unauthorized"}'
