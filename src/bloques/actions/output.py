"""Delegate output classification and the error surface.

Delegates answer with text that may be literal output or a path to a file
they produced. ``classify_output`` decides which, so the host can show an
image inline, inline a file's contents, or print the text as is.
"""

import threading
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path

IMAGE_SUFFIXES = frozenset({".png", ".jpg", ".jpeg", ".gif", ".svg", ".bmp", ".webp"})


class OutputKind(Enum):
    """Shape of a delegate's captured output."""

    NONE = auto()
    TEXT = auto()
    FILE = auto()
    IMAGE = auto()


@dataclass(frozen=True, slots=True)
class BlockOutput:
    """Classified delegate output.

    Attributes:
        kind: Output shape
        text: Literal text, or the file's contents for FILE
        path: File path for FILE and IMAGE

    """

    kind: OutputKind
    text: str = ""
    path: Path | None = None


NO_OUTPUT = BlockOutput(OutputKind.NONE)


def _existing_file(candidate: str) -> Path | None:
    if "\n" in candidate or len(candidate) > 4096:
        return None
    path = Path(candidate).expanduser()
    try:
        return path if path.is_file() else None
    except OSError:
        return None


def classify_output(output: str | None) -> BlockOutput:
    """Classify raw delegate output.

    Args:
        output: Text returned by the delegate, possibly a file path

    Returns:
        IMAGE for an existing image file, FILE (with contents) for any other
        existing file, TEXT otherwise, NONE for missing or blank output.
    """
    if output is None or not output.strip():
        return NO_OUTPUT

    path = _existing_file(output.strip())
    if path is None:
        return BlockOutput(OutputKind.TEXT, text=output)
    if path.suffix.lower() in IMAGE_SUFFIXES:
        return BlockOutput(OutputKind.IMAGE, path=path)
    try:
        contents = path.read_text(errors="replace")
    except OSError:
        return BlockOutput(OutputKind.TEXT, text=output)
    return BlockOutput(OutputKind.FILE, text=contents, path=path)


@dataclass(frozen=True, slots=True)
class ErrorEntry:
    """One captured failure."""

    language: str
    message: str
    key: int


class ErrorLog:
    """Dedicated, visible error surface for action failures.

    Failures are recorded here instead of being raised to the caller.

    Thread Safety:
        Internally locked; delegates record from worker threads.
    """

    __slots__ = ("_entries", "_lock")

    def __init__(self) -> None:
        self._entries: list[ErrorEntry] = []
        self._lock = threading.Lock()

    def record(self, language: str, message: str, key: int) -> ErrorEntry:
        entry = ErrorEntry(language, message, key)
        with self._lock:
            self._entries.append(entry)
        return entry

    @property
    def entries(self) -> tuple[ErrorEntry, ...]:
        with self._lock:
            return tuple(self._entries)

    def entries_for(self, key: int) -> tuple[ErrorEntry, ...]:
        with self._lock:
            return tuple(e for e in self._entries if e.key == key)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
