"""Transcript facade: one buffer wired to scanning, rendering, navigation and actions.

A host (terminal UI, editor plugin, web view) owns one ``Transcript`` per
conversation buffer. The facade keeps the BlockModel in step with the
buffer, re-rendering decorations on scan-safe points, and exposes the
point-based commands a user triggers.

Every user-facing failure is reported through ``notify`` as a transient
message. No BloquesError escapes a command.

Example:
    >>> transcript = Transcript(notify=print)
    >>> transcript.append("ChatGPT> hi\\n```python\\nprint(1)\\n```")
    >>> _ = transcript.finish()
    >>> transcript.next_item()
    9
    >>> transcript.next_item()
    22
    >>> transcript.block_text_at()
    'print(1)'

"""

from __future__ import annotations

import webbrowser
from collections.abc import Callable, Mapping
from typing import Protocol

from bloques.actions import (
    ActionRegistry,
    BlockActionDispatcher,
    DispatchOutcome,
    ErrorLog,
    ExecutionDelegate,
    ExecutionResult,
    LanguageResolver,
)
from bloques.arbiter import resolve
from bloques.buffer import TranscriptBuffer
from bloques.cache import ModelCache
from bloques.config import DEFAULT_CONFIG, EngineConfig
from bloques.errors import BloquesError, InvalidLanguageError, NoBlockError
from bloques.incremental import rescan
from bloques.location import Span
from bloques.model import BlockModel
from bloques.navigation import Navigator, PromptFraming, RegexPromptFraming
from bloques.nodes import SourceBlock
from bloques.renderers import ActionBinding, Decoration, DisplayHost, InMemoryDisplay
from bloques.renderers.decorations import COPY_BLOCK, OPEN_URL
from bloques.renderers.overlay import OverlayRenderer
from bloques.scanners import is_language_token
from bloques.utils.logger import get_logger

logger = get_logger(__name__)


class Clipboard(Protocol):
    """Shared clipboard collaborator."""

    def copy(self, text: str) -> None: ...


class InMemoryClipboard:
    """Clipboard keeping every copied text, newest last."""

    __slots__ = ("history",)

    def __init__(self) -> None:
        self.history: list[str] = []

    def copy(self, text: str) -> None:
        self.history.append(text)

    @property
    def contents(self) -> str | None:
        return self.history[-1] if self.history else None


def _run_now(callback: Callable[[], None]) -> None:
    callback()


class Transcript:
    """Structural annotation and navigation over one transcript buffer."""

    def __init__(
        self,
        buffer: TranscriptBuffer | None = None,
        config: EngineConfig | None = None,
        *,
        host: DisplayHost | None = None,
        renderer: OverlayRenderer | None = None,
        framing: PromptFraming | None = None,
        clipboard: Clipboard | None = None,
        actions: ActionRegistry | None = None,
        delegate: ExecutionDelegate | None = None,
        dispatcher: BlockActionDispatcher | None = None,
        confirm: Callable[[str], bool] | None = None,
        notify: Callable[[str], None] | None = None,
        schedule: Callable[[Callable[[], None]], None] | None = None,
        on_result: Callable[[ExecutionResult], None] | None = None,
        open_url: Callable[[str], object] | None = None,
        cache: ModelCache | None = None,
    ) -> None:
        """Initialize transcript.

        Args:
            buffer: Buffer to annotate (a new empty one if None)
            config: Engine configuration (defaults if None)
            host: Display host receiving decorations (in-memory if None)
            renderer: Decoration renderer (built from config if None)
            framing: Prompt boundary collaborator (config prompt pattern if None)
            clipboard: Clipboard collaborator (in-memory if None)
            actions: Custom block actions
            delegate: Execution backend for block bodies
            dispatcher: Fully built dispatcher; overrides actions/delegate/confirm
            confirm: Yes/no question to the user
            notify: Transient, non-blocking user notification
            schedule: Runs completion work on the host's interaction thread
                (immediately, on the worker thread, if None)
            on_result: Receives execution results while the buffer is alive
            open_url: Opens a link target (the system browser if None)
            cache: Content-addressed model cache for full scans
        """
        self._config = config or DEFAULT_CONFIG
        self._buffer = buffer if buffer is not None else TranscriptBuffer()
        self._notify = notify or (lambda message: logger.info("%s", message))
        resolver = LanguageResolver(self._config.language_aliases)
        self._host: DisplayHost = host if host is not None else InMemoryDisplay()
        self._renderer = renderer or OverlayRenderer(self._config, resolver=resolver)
        self._framing = framing or RegexPromptFraming(self._config.prompt_pattern)
        self._clipboard: Clipboard = clipboard or InMemoryClipboard()
        self._dispatcher = dispatcher or BlockActionDispatcher(
            self._config,
            resolver=resolver,
            actions=actions,
            delegate=delegate,
            confirm=confirm,
            notify=self._notify,
            error_log=ErrorLog(),
        )
        self._schedule = schedule or _run_now
        self._on_result = on_result
        self._open_url = open_url or webbrowser.open
        self._cache = cache
        self._model: BlockModel | None = None
        self._point = 0
        self.results: list[ExecutionResult] = []

    # =========================================================================
    # State
    # =========================================================================

    @property
    def buffer(self) -> TranscriptBuffer:
        return self._buffer

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def host(self) -> DisplayHost:
        return self._host

    @property
    def dispatcher(self) -> BlockActionDispatcher:
        return self._dispatcher

    @property
    def error_log(self) -> ErrorLog:
        return self._dispatcher.error_log

    @property
    def text(self) -> str:
        return self._buffer.text

    @property
    def point(self) -> int:
        return self._point

    @point.setter
    def point(self, value: int) -> None:
        self._point = max(0, min(value, len(self._buffer)))

    @property
    def model(self) -> BlockModel:
        """BlockModel of the current buffer text, re-scanned when stale."""
        if self._model is not None and self._model.version == self._buffer.version:
            return self._model

        snap = self._buffer.checkpoint()
        if self._model is not None and snap.dirty_from is not None:
            self._model = rescan(
                snap.text, self._model, snap.dirty_from, config=self._config, version=snap.version
            )
        else:
            self._model = resolve(
                snap.text, config=self._config, version=snap.version, cache=self._cache
            )
        return self._model

    # =========================================================================
    # Transport
    # =========================================================================

    def append(self, chunk: str) -> None:
        """Append streamed response text. Rendering waits for ``finish``."""
        self._buffer.append(chunk)

    def finish(self) -> tuple[Decoration, ...]:
        """Mark a scan-safe point and re-render."""
        self._buffer.finish()
        return self.refresh()

    def close(self) -> None:
        """Kill the buffer; pending actions will not deliver into it."""
        self._buffer.kill()
        self._dispatcher.shutdown(wait=False)

    # =========================================================================
    # Rendering and navigation
    # =========================================================================

    def refresh(self) -> tuple[Decoration, ...]:
        """Clear and reapply every decoration from the current model."""
        model = self.model
        snapshot = self._buffer.snapshot()
        try:
            return self._renderer.render(
                model, snapshot.text, self._host, version=snapshot.version
            )
        except BloquesError as exc:
            self._notify(str(exc))
            return ()

    def next_item(self) -> int | None:
        """Move point to the next block body or prompt. Returns the new point."""
        target = self._navigator().next_item(self._point)
        if target is not None:
            self._point = target
        return target

    def previous_item(self) -> int | None:
        """Move point to the previous block body or prompt. Returns the new point."""
        target = self._navigator().previous_item(self._point)
        if target is not None:
            self._point = target
        return target

    def _navigator(self) -> Navigator:
        text = self._buffer.text
        return Navigator(self.model, self._framing.boundaries(text))

    # =========================================================================
    # Block commands
    # =========================================================================

    def block_at(self, point: int | None = None) -> SourceBlock | None:
        return self.model.block_at(self._point if point is None else point)

    def _require_block(self, point: int | None) -> SourceBlock:
        point = self._point if point is None else point
        block = self.model.block_at(point)
        if block is None:
            raise NoBlockError(point)
        return block

    def block_text_at(self, point: int | None = None) -> str | None:
        """Body text of the block at point."""
        try:
            return self._require_block(point).body_text(self._buffer.text)
        except BloquesError as exc:
            self._notify(str(exc))
            return None

    def mark_block_at(self, point: int | None = None) -> Span | None:
        """Body span of the block at point, for the host to select."""
        try:
            return self._require_block(point).body
        except BloquesError as exc:
            self._notify(str(exc))
            return None

    def copy_block_at(self, point: int | None = None) -> str | None:
        """Copy the body of the block at point to the clipboard."""
        body = self.block_text_at(point)
        if body is not None:
            self._clipboard.copy(body)
            self._notify("Copied")
        return body

    def set_block_language(self, language: str, point: int | None = None) -> bool:
        """Rewrite the language tag of the block at point, then re-render.

        Works on untagged blocks too, through their empty language span. A
        tag that would break the opening fence is refused and the buffer is
        left as it was.
        """
        language = language.strip()
        try:
            if not is_language_token(language):
                raise InvalidLanguageError(language)
            block = self._require_block(point)
            self._buffer.replace(block.language, language)
        except BloquesError as exc:
            self._notify(str(exc))
            return False
        self.refresh()
        return True

    def execute_block_at(
        self, point: int | None = None, *, params: Mapping[str, str] | None = None
    ) -> DispatchOutcome | None:
        """Run the primary action of the block at point.

        Returns:
            The dispatch outcome, or None when the request was rejected
            (no block, no primary action, busy).
        """
        try:
            block = self._require_block(point)
            return self._dispatcher.dispatch(
                block, self._buffer.text, params=params, on_complete=self._complete
            )
        except BloquesError as exc:
            self._notify(str(exc))
            return None

    def perform(self, binding: ActionBinding) -> None:
        """Run an action bound to a decoration."""
        if binding.command == COPY_BLOCK:
            self._clipboard.copy(binding.argument)
            self._notify("Copied")
        elif binding.command == OPEN_URL:
            self._open_url(binding.argument)
        else:
            logger.warning("Unknown action command %r", binding.command)

    def _complete(self, success: bool, result: ExecutionResult) -> None:
        buffer = self._buffer

        def deliver() -> None:
            if not buffer.alive:
                logger.debug("Dropping %s result, buffer was killed", result.language)
                return
            self.results.append(result)
            if self._on_result is not None:
                self._on_result(result)

        self._schedule(deliver)
