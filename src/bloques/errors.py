"""Exception classes for Bloques.

Lower layers raise these; the Transcript facade turns them into transient
notifications so that no failure ever interrupts the editing session.
"""

from __future__ import annotations


class BloquesError(Exception):
    """Base exception for all Bloques errors.

    Subclass this for specific error categories.
    """

    pass


class NoBlockError(BloquesError):
    """Raised when a block operation is requested outside any source block."""

    def __init__(self, point: int) -> None:
        self.point = point
        super().__init__(f"No source block at point {point}")


class InvalidLanguageError(BloquesError):
    """Raised when a language tag would stop its opening line being a fence."""

    def __init__(self, language: str) -> None:
        self.language = language
        super().__init__(
            f"Invalid language tag {language!r}: use letters, digits, '-' or '+'"
        )


class NoPrimaryActionError(BloquesError):
    """Raised when a block's language has neither a custom action nor a delegate.

    Fatal to the action request only; rendering and navigation are unaffected.
    """

    def __init__(self, language: str | None) -> None:
        self.language = language
        label = language or "untagged"
        super().__init__(f"No primary action for {label} blocks")


class BusyError(BloquesError):
    """Raised when an action is requested for a block that is already running one.

    The in-flight action continues unaffected.
    """

    def __init__(self, key: int, language: str | None = None) -> None:
        self.key = key
        self.language = language
        label = f" ({language})" if language else ""
        super().__init__(f"Busy: block at {key}{label} is already executing")


class DelegateError(BloquesError):
    """Failure reported by an execution delegate.

    Never raised across the worker boundary; it is recorded in the ErrorLog.
    """

    def __init__(self, language: str, message: str) -> None:
        self.language = language
        super().__init__(f"{language}: {message}")


class StaleModelError(BloquesError):
    """Raised when a BlockModel is used against a buffer version it was not built from."""

    def __init__(self, model_version: int, buffer_version: int) -> None:
        self.model_version = model_version
        self.buffer_version = buffer_version
        super().__init__(
            f"Block model built for version {model_version}, buffer is at {buffer_version}"
        )


class RenderError(BloquesError):
    """Error during decoration rendering.

    Raised when a model does not describe the text it is rendered against.
    """

    pass


class BufferClosedError(BloquesError):
    """Raised when a killed transcript buffer is mutated."""

    def __init__(self) -> None:
        super().__init__("Transcript buffer has been killed")
