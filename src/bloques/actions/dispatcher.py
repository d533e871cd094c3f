"""Block action dispatcher.

One lookup drives every request: raw language token -> canonical identifier
-> custom action, else execution delegate, else no action. Custom actions
run synchronously on the calling thread once the user confirms their
prompt. Delegates run as detached work on an executor so the scanning and
rendering path never waits on an external process.

At most one action runs per block. A block is keyed by the offset of its
opening fence; a request for a key that is still pending raises BusyError
and the in-flight action continues.

Thread Safety:
    ``dispatch`` is called from the interaction thread. The pending set and
    the ErrorLog are locked because delegate work finishes on worker threads.
    Completion callbacks run on the worker thread.

"""

from __future__ import annotations

import threading
from collections.abc import Callable, Mapping
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum, auto

from bloques.actions.aliases import LanguageResolver
from bloques.actions.delegates import (
    DelegateResult,
    ExecutionDelegate,
    SubprocessDelegate,
    build_params,
)
from bloques.actions.output import BlockOutput, ErrorLog, OutputKind, classify_output
from bloques.actions.registry import EMPTY_REGISTRY, ActionRegistry, BlockAction
from bloques.config import DEFAULT_CONFIG, EngineConfig
from bloques.errors import BusyError, DelegateError, NoPrimaryActionError
from bloques.nodes import SourceBlock
from bloques.utils.logger import get_logger

logger = get_logger(__name__)

EXECUTE_PROMPT = "Execute it?"


class DispatchStatus(Enum):
    """How a dispatch request ended on the calling thread."""

    COMPLETED = auto()  # custom action ran
    FAILED = auto()  # custom action raised; recorded in the ErrorLog
    SUBMITTED = auto()  # delegate work is running
    CANCELLED = auto()  # confirmation declined


@dataclass(frozen=True, slots=True)
class ExecutionResult:
    """Outcome of one delegate run, handed to the completion callback."""

    language: str
    success: bool
    output: BlockOutput
    error: str | None = None


@dataclass(frozen=True, slots=True)
class DispatchOutcome:
    """Immediate result of ``dispatch``.

    Attributes:
        status: How the request ended on the calling thread
        language: Canonical identifier the block resolved to
        future: Delegate work, for SUBMITTED outcomes only

    """

    status: DispatchStatus
    language: str | None
    future: Future[ExecutionResult] | None = None


CompletionCallback = Callable[[bool, ExecutionResult], None]
ConfirmCallback = Callable[[str], bool]


def _always_confirm(prompt: str) -> bool:
    return True


def _log_notification(message: str) -> None:
    logger.info("%s", message)


class BlockActionDispatcher:
    """Resolve and run the primary action of a source block.

    Usage:
        >>> dispatcher = BlockActionDispatcher(confirm=ask_user)
        >>> outcome = dispatcher.dispatch(block, text, on_complete=show)
        >>> outcome.status
        <DispatchStatus.SUBMITTED: 3>

    """

    __slots__ = (
        "_config",
        "_resolver",
        "_actions",
        "_delegate",
        "_confirm",
        "_notify",
        "_error_log",
        "_executor",
        "_owns_executor",
        "_lock",
        "_pending",
    )

    def __init__(
        self,
        config: EngineConfig | None = None,
        *,
        resolver: LanguageResolver | None = None,
        actions: ActionRegistry | None = None,
        delegate: ExecutionDelegate | None = None,
        confirm: ConfirmCallback | None = None,
        notify: Callable[[str], None] | None = None,
        error_log: ErrorLog | None = None,
        executor: Executor | None = None,
    ) -> None:
        """Initialize dispatcher.

        Args:
            config: Engine configuration (defaults if None)
            resolver: Language alias resolver (built from config if None)
            actions: Custom action registry
            delegate: Execution backend (local interpreters if None)
            confirm: Asks the user a yes/no question (always yes if None)
            notify: Transient user notification (logged if None)
            error_log: Error surface for failures
            executor: Runs delegate work (a private thread pool if None)
        """
        self._config = config or DEFAULT_CONFIG
        self._resolver = resolver or LanguageResolver(self._config.language_aliases)
        self._actions = actions or EMPTY_REGISTRY
        self._delegate = delegate or SubprocessDelegate(timeout=self._config.delegate_timeout)
        self._confirm = confirm or _always_confirm
        self._notify = notify or _log_notification
        self._error_log = error_log if error_log is not None else ErrorLog()
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=2, thread_name_prefix="bloques-action"
        )
        self._lock = threading.Lock()
        self._pending: set[int] = set()

    @property
    def error_log(self) -> ErrorLog:
        return self._error_log

    def resolve_language(self, block: SourceBlock, source: str) -> str | None:
        """Canonical identifier for the block's language tag, if any."""
        return self._resolver.resolve(block.language_text(source))

    def primary_action(self, block: SourceBlock, source: str) -> BlockAction | str:
        """Return the custom action, or the canonical id the delegate will run.

        Raises:
            NoPrimaryActionError: If neither resolves.
        """
        raw = block.language_text(source)
        language = self._resolver.resolve(raw)
        action = self._actions.get(language)
        if action is not None:
            return action
        if language is not None and self._delegate.has_delegate(language):
            return language
        raise NoPrimaryActionError(language or raw)

    def is_busy(self, block: SourceBlock) -> bool:
        with self._lock:
            return block.span.start in self._pending

    def dispatch(
        self,
        block: SourceBlock,
        source: str,
        *,
        params: Mapping[str, str] | None = None,
        on_complete: CompletionCallback | None = None,
    ) -> DispatchOutcome:
        """Run the block's primary action.

        Args:
            block: Block to act on
            source: Buffer text snapshot the block was scanned from
            params: Call-site delegate parameters (highest precedence)
            on_complete: Called with ``(success, result)`` when delegate work
                finishes; not called for custom actions

        Raises:
            NoPrimaryActionError: If the language has no action and no delegate
            BusyError: If an action for this block is still running
        """
        target = self.primary_action(block, source)
        key = block.span.start
        body = block.body_text(source)

        if isinstance(target, BlockAction):
            return self._run_custom(target, key, body)
        return self._submit(target, key, body, params, on_complete)

    def shutdown(self, wait: bool = True) -> None:
        """Stop the private executor, if this dispatcher created it."""
        if self._owns_executor:
            self._executor.shutdown(wait=wait)

    # =========================================================================
    # Busy tracking
    # =========================================================================

    def _acquire(self, key: int, language: str) -> None:
        with self._lock:
            if key in self._pending:
                raise BusyError(key, language)
            self._pending.add(key)

    def _release(self, key: int) -> None:
        with self._lock:
            self._pending.discard(key)

    # =========================================================================
    # Custom actions
    # =========================================================================

    def _run_custom(self, action: BlockAction, key: int, body: str) -> DispatchOutcome:
        self._acquire(key, action.language)
        try:
            if not self._confirm(action.prompt):
                return DispatchOutcome(DispatchStatus.CANCELLED, action.language)
            logger.info("Running custom %s action for block at %d", action.language, key)
            try:
                action.handler(body)
            except Exception as exc:
                logger.exception("Custom %s action failed", action.language)
                self._error_log.record(action.language, str(exc) or type(exc).__name__, key)
                self._notify(str(DelegateError(action.language, str(exc))))
                return DispatchOutcome(DispatchStatus.FAILED, action.language)
            return DispatchOutcome(DispatchStatus.COMPLETED, action.language)
        finally:
            self._release(key)

    # =========================================================================
    # Delegates
    # =========================================================================

    def _submit(
        self,
        language: str,
        key: int,
        body: str,
        params: Mapping[str, str] | None,
        on_complete: CompletionCallback | None,
    ) -> DispatchOutcome:
        self._acquire(key, language)
        try:
            if self._config.confirm_execution and not self._confirm(EXECUTE_PROMPT):
                self._release(key)
                return DispatchOutcome(DispatchStatus.CANCELLED, language)
            merged = build_params(language, self._delegate, self._config.header_overrides, params)
            logger.info("Submitting %s block at %d with params %s", language, key, merged)
            future = self._executor.submit(self._execute, language, key, body, merged, on_complete)
        except BaseException:
            self._release(key)
            raise
        return DispatchOutcome(DispatchStatus.SUBMITTED, language, future)

    def _execute(
        self,
        language: str,
        key: int,
        body: str,
        params: Mapping[str, str],
        on_complete: CompletionCallback | None,
    ) -> ExecutionResult:
        """Worker-thread body: run the delegate, record errors, report back."""
        try:
            try:
                raw = self._delegate.execute(language, body, params)
            except Exception as exc:
                logger.exception("Delegate for %s raised", language)
                raw = DelegateResult(False, error=str(exc) or type(exc).__name__)

            if raw.error:
                self._error_log.record(language, raw.error, key)

            output = classify_output(raw.output)
            result = ExecutionResult(language, raw.success, output, raw.error)

            if output.kind is OutputKind.NONE and not raw.error:
                self._notify(f"No output; check that the {language} delegate is installed")
            elif raw.error:
                self._notify(str(DelegateError(language, raw.error)))
        finally:
            self._release(key)

        if on_complete is not None:
            try:
                on_complete(result.success, result)
            except Exception:
                logger.exception("Completion callback for %s block at %d failed", language, key)
        return result
