"""Tests for language aliases, the action registry, output classification and delegates."""

import sys
import tempfile
from collections.abc import Mapping
from pathlib import Path

import pytest

from bloques.actions import (
    ActionRegistryBuilder,
    BlockAction,
    DelegateResult,
    ErrorLog,
    Interpreter,
    LanguageResolver,
    OutputKind,
    SubprocessDelegate,
    build_params,
    classify_output,
)
from bloques.actions.delegates import expand_temp_file
from bloques.config import TEMP_FILE_PLACEHOLDER

PYTHON = {"python": Interpreter((sys.executable, "{source}"), ".py")}


class StaticDelegate:
    """Delegate with fixed defaults for parameter-merging tests."""

    def __init__(self, defaults: Mapping[str, str]) -> None:
        self.defaults = dict(defaults)

    def has_delegate(self, identifier: str) -> bool:
        return True

    def default_params(self, identifier: str) -> Mapping[str, str]:
        return self.defaults

    def execute(self, identifier: str, body: str, params: Mapping[str, str]) -> DelegateResult:
        return DelegateResult(True, output=body)


# ---------------------------------------------------------------------------
# LanguageResolver
# ---------------------------------------------------------------------------


class TestLanguageResolver:
    def test_alias_is_case_insensitive(self) -> None:
        resolver = LanguageResolver()
        assert resolver.resolve("ELisp") == "emacs-lisp"
        assert resolver.resolve("Objective-C") == "objc"
        assert resolver.resolve("PY") == "python"

    def test_fallback_accepts_known_display_modes(self) -> None:
        resolver = LanguageResolver()
        assert resolver.resolve("python") == "python"
        assert resolver.resolve("Rust") == "rust"

    def test_unknown_language(self) -> None:
        assert LanguageResolver().resolve("nosuchlang") is None

    def test_missing_token(self) -> None:
        resolver = LanguageResolver()
        assert resolver.resolve(None) is None
        assert resolver.resolve("") is None
        assert resolver.resolve("   ") is None

    def test_custom_table_and_fallback(self) -> None:
        resolver = LanguageResolver({"Diff": "patch"}, fallback=lambda name: name == "mine")
        assert resolver.resolve("diff") == "patch"
        assert resolver.resolve("mine") == "mine"
        assert resolver.resolve("python") is None


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class TestActionRegistry:
    def test_register_and_get(self) -> None:
        action = BlockAction("diff", "Apply patch?", print)
        registry = ActionRegistryBuilder().register(action).build()
        assert registry.get("diff") is action
        assert registry.get("DIFF") is action
        assert "Diff" in registry
        assert len(registry) == 1

    def test_missing(self) -> None:
        registry = ActionRegistryBuilder().build()
        assert registry.get("diff") is None
        assert registry.get(None) is None

    def test_duplicate_rejected(self) -> None:
        builder = ActionRegistryBuilder().register(BlockAction("diff", "?", print))
        with pytest.raises(ValueError, match="already registered"):
            builder.register(BlockAction("Diff", "?", print))

    def test_register_all(self) -> None:
        builder = ActionRegistryBuilder().register_all(
            [BlockAction("a", "?", print), BlockAction("b", "?", print)]
        )
        assert len(builder) == 2
        assert builder.build().languages == frozenset({"a", "b"})


# ---------------------------------------------------------------------------
# Output classification
# ---------------------------------------------------------------------------


class TestClassifyOutput:
    def test_missing_output(self) -> None:
        assert classify_output(None).kind is OutputKind.NONE
        assert classify_output("").kind is OutputKind.NONE
        assert classify_output("  \n").kind is OutputKind.NONE

    def test_literal_text(self) -> None:
        output = classify_output("hello\nworld")
        assert output.kind is OutputKind.TEXT
        assert output.text == "hello\nworld"

    def test_image_path(self, tmp_path: Path) -> None:
        image = tmp_path / "graph.PNG"
        image.write_bytes(b"\x89PNG")
        output = classify_output(f"{image}\n")
        assert output.kind is OutputKind.IMAGE
        assert output.path == image

    def test_other_file_is_inlined(self, tmp_path: Path) -> None:
        data = tmp_path / "out.txt"
        data.write_text("contents")
        output = classify_output(str(data))
        assert output.kind is OutputKind.FILE
        assert output.text == "contents"

    def test_nonexistent_path_is_text(self) -> None:
        assert classify_output("/no/such/file.png").kind is OutputKind.TEXT


class TestErrorLog:
    def test_record_and_filter(self) -> None:
        log = ErrorLog()
        log.record("python", "boom", 3)
        log.record("bash", "bad", 7)
        assert len(log) == 2
        assert [e.message for e in log.entries_for(7)] == ["bad"]
        log.clear()
        assert log.entries == ()


# ---------------------------------------------------------------------------
# Parameters
# ---------------------------------------------------------------------------


class TestBuildParams:
    def test_precedence(self) -> None:
        delegate = StaticDelegate({"results": "output", "session": "none"})
        params = build_params(
            "lisp",
            delegate,
            {"lisp": {"session": "main", "results": "value"}},
            {"results": "silent"},
        )
        assert params == {"results": "silent", "session": "main"}

    def test_temp_file_expanded(self) -> None:
        delegate = StaticDelegate({})
        params = build_params("dot", delegate, {"dot": {"file": f"{TEMP_FILE_PLACEHOLDER}.png"}})
        assert TEMP_FILE_PLACEHOLDER not in params["file"]
        assert params["file"].endswith(".png")
        assert params["file"].startswith(tempfile.gettempdir())

    def test_temp_files_are_fresh(self) -> None:
        assert expand_temp_file(TEMP_FILE_PLACEHOLDER) != expand_temp_file(TEMP_FILE_PLACEHOLDER)
        assert expand_temp_file("plain") == "plain"


# ---------------------------------------------------------------------------
# SubprocessDelegate
# ---------------------------------------------------------------------------


class TestSubprocessDelegate:
    def test_has_delegate(self) -> None:
        delegate = SubprocessDelegate(PYTHON)
        assert delegate.has_delegate("python")
        assert not delegate.has_delegate("cobol")

    def test_missing_executable(self) -> None:
        delegate = SubprocessDelegate({"x": Interpreter(("no-such-binary-xyz", "{source}"), ".x")})
        assert not delegate.has_delegate("x")

    def test_default_params(self) -> None:
        params = SubprocessDelegate(PYTHON, timeout=5).default_params("python")
        assert params["results"] == "output"
        assert params["timeout"] == "5"

    def test_stdout_is_output(self) -> None:
        result = SubprocessDelegate(PYTHON).execute("python", "print('hi')", {})
        assert result.success
        assert result.output == "hi\n"
        assert result.error is None

    def test_nonzero_exit_is_error(self) -> None:
        result = SubprocessDelegate(PYTHON).execute("python", "raise SystemExit(3)", {})
        assert not result.success
        assert result.error == "exit status 3"

    def test_stderr_is_error(self) -> None:
        body = "import sys\nsys.stderr.write('bad')"
        result = SubprocessDelegate(PYTHON).execute("python", body, {})
        assert result.success
        assert result.error == "bad"

    def test_timeout(self) -> None:
        body = "import time\ntime.sleep(5)"
        result = SubprocessDelegate(PYTHON).execute("python", body, {"timeout": "0.5"})
        assert not result.success
        assert result.error == "Timed out after 0.5s"

    def test_file_producing_tool(self, tmp_path: Path) -> None:
        tool = {"plot": Interpreter((sys.executable, "{source}", "{file}"), ".py")}
        target = tmp_path / "plot.png"
        body = "import sys\nopen(sys.argv[1], 'wb').write(b'png')"
        result = SubprocessDelegate(tool).execute("plot", body, {"file": str(target)})
        assert result.success
        assert result.output == str(target)
        assert classify_output(result.output).kind is OutputKind.IMAGE

    def test_file_producing_tool_needs_file_param(self) -> None:
        tool = {"plot": Interpreter((sys.executable, "{source}", "{file}"), ".py")}
        result = SubprocessDelegate(tool).execute("plot", "", {})
        assert not result.success
        assert "file" in result.error

    def test_unknown_language(self) -> None:
        result = SubprocessDelegate(PYTHON).execute("cobol", "x", {})
        assert not result.success
