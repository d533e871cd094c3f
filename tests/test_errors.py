"""Tests for the exception taxonomy."""

import pytest

from bloques.errors import (
    BloquesError,
    BufferClosedError,
    BusyError,
    DelegateError,
    InvalidLanguageError,
    NoBlockError,
    NoPrimaryActionError,
    RenderError,
    StaleModelError,
)


class TestMessages:
    def test_no_primary_action(self) -> None:
        assert str(NoPrimaryActionError("cobol")) == "No primary action for cobol blocks"
        assert str(NoPrimaryActionError(None)) == "No primary action for untagged blocks"

    def test_busy(self) -> None:
        error = BusyError(12, "python")
        assert error.key == 12
        assert "already executing" in str(error)
        assert "(python)" in str(error)

    def test_no_block(self) -> None:
        assert NoBlockError(5).point == 5
        assert str(NoBlockError(5)) == "No source block at point 5"

    def test_delegate(self) -> None:
        assert str(DelegateError("bash", "not found")) == "bash: not found"

    def test_invalid_language(self) -> None:
        error = InvalidLanguageError("c#")
        assert error.language == "c#"
        assert str(error).startswith("Invalid language tag 'c#'")

    def test_stale_model(self) -> None:
        error = StaleModelError(1, 2)
        assert (error.model_version, error.buffer_version) == (1, 2)


class TestHierarchy:
    @pytest.mark.parametrize(
        "error",
        [
            NoPrimaryActionError("x"),
            BusyError(0),
            NoBlockError(0),
            DelegateError("x", "y"),
            StaleModelError(0, 1),
            RenderError("x"),
            BufferClosedError(),
            InvalidLanguageError("x"),
        ],
    )
    def test_all_are_bloques_errors(self, error: Exception) -> None:
        assert isinstance(error, BloquesError)
