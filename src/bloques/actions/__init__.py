"""Block actions: language resolution, custom actions, delegates and dispatch."""

from bloques.actions.aliases import LanguageResolver
from bloques.actions.delegates import (
    DEFAULT_INTERPRETERS,
    DelegateResult,
    ExecutionDelegate,
    Interpreter,
    SubprocessDelegate,
    build_params,
)
from bloques.actions.dispatcher import (
    EXECUTE_PROMPT,
    BlockActionDispatcher,
    DispatchOutcome,
    DispatchStatus,
    ExecutionResult,
)
from bloques.actions.output import (
    BlockOutput,
    ErrorEntry,
    ErrorLog,
    OutputKind,
    classify_output,
)
from bloques.actions.registry import (
    EMPTY_REGISTRY,
    ActionRegistry,
    ActionRegistryBuilder,
    BlockAction,
)

__all__ = [
    "DEFAULT_INTERPRETERS",
    "EMPTY_REGISTRY",
    "EXECUTE_PROMPT",
    "ActionRegistry",
    "ActionRegistryBuilder",
    "BlockAction",
    "BlockActionDispatcher",
    "BlockOutput",
    "DelegateResult",
    "DispatchOutcome",
    "DispatchStatus",
    "ErrorEntry",
    "ErrorLog",
    "ExecutionDelegate",
    "ExecutionResult",
    "Interpreter",
    "OutputKind",
    "SubprocessDelegate",
    "build_params",
    "classify_output",
]
