"""
Bloques — Structural annotation and navigation for chat transcripts

Finds fenced code blocks, headers, links and inline emphasis in a transcript
buffer, resolves them into a disjoint BlockModel, renders them as
non-destructive decorations, navigates between blocks and prompts, and runs
a block's primary action through a custom handler or an execution delegate.

Quick Start:
    >>> from bloques import resolve, render
    >>> model = resolve("```python\\nprint(1)\\n```")
    >>> model.blocks[0].body_text("```python\\nprint(1)\\n```")
    'print(1)'

    >>> # Or drive a whole buffer through the Transcript facade
    >>> from bloques import Transcript
    >>> transcript = Transcript(notify=print)
    >>> transcript.append("ChatGPT> **hi**")
    >>> decorations = transcript.finish()

Custom Actions:
    >>> from bloques import ActionRegistryBuilder, BlockAction, Transcript
    >>>
    >>> builder = ActionRegistryBuilder()
    >>> builder.register(BlockAction("diff", "Apply patch?", apply_patch))
    >>> transcript = Transcript(actions=builder.build(), confirm=ask_user)
    >>> transcript.execute_block_at(point)

Installation:
    pip install bloques              # Engine + Pygments highlighting
    pip install bloques[test]        # + pytest and Hypothesis
"""

from bloques.actions import (
    ActionRegistry,
    ActionRegistryBuilder,
    BlockAction,
    BlockActionDispatcher,
    BlockOutput,
    DelegateResult,
    DispatchOutcome,
    DispatchStatus,
    ErrorLog,
    ExecutionDelegate,
    ExecutionResult,
    LanguageResolver,
    OutputKind,
    SubprocessDelegate,
    classify_output,
)
from bloques.arbiter import RangeArbiter, resolve
from bloques.buffer import Snapshot, TranscriptBuffer
from bloques.cache import DictModelCache, ModelCache, hash_config, hash_content
from bloques.config import DEFAULT_CONFIG, EngineConfig
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
from bloques.highlighting import Highlighter, PygmentsHighlighter
from bloques.incremental import rescan
from bloques.location import Span
from bloques.model import BlockModel
from bloques.navigation import Navigator, PromptFraming, RegexPromptFraming
from bloques.nodes import (
    Bold,
    Header,
    InlineAnnotation,
    InlineCode,
    Italic,
    Link,
    SourceBlock,
    Strikethrough,
)
from bloques.renderers import (
    ActionBinding,
    Decoration,
    DecorationKind,
    DisplayHost,
    InMemoryDisplay,
    OverlayRenderer,
)
from bloques.serialization import decorations_to_json, from_json, to_json
from bloques.session import Clipboard, InMemoryClipboard, Transcript
from bloques.tokens import ARBITRATION_ORDER, ConstructKind

__version__ = "0.1.0"


def render(
    source: str,
    host: DisplayHost | None = None,
    *,
    config: EngineConfig | None = None,
) -> tuple[Decoration, ...]:
    """Resolve text and render its decorations in one call.

    Args:
        source: Transcript text
        host: Display host to apply decorations to (none if None)
        config: Engine configuration (defaults if None)

    Returns:
        Decorations in buffer order

    Example:
        >>> [d.kind.name for d in render("**hi**")]
        ['HIDE', 'FACE', 'HIDE']
    """
    config = config or DEFAULT_CONFIG
    model = resolve(source, config=config)
    renderer = OverlayRenderer(config, resolver=LanguageResolver(config.language_aliases))
    if host is None:
        return renderer.decorations(model, source)
    return renderer.render(model, source, host)


__all__ = [
    "ARBITRATION_ORDER",
    "DEFAULT_CONFIG",
    "ActionBinding",
    "ActionRegistry",
    "ActionRegistryBuilder",
    "BlockAction",
    "BlockActionDispatcher",
    "BlockModel",
    "BlockOutput",
    "BloquesError",
    "Bold",
    "BufferClosedError",
    "BusyError",
    "Clipboard",
    "ConstructKind",
    "Decoration",
    "DecorationKind",
    "DelegateError",
    "DelegateResult",
    "DictModelCache",
    "DispatchOutcome",
    "DispatchStatus",
    "DisplayHost",
    "EngineConfig",
    "ErrorLog",
    "ExecutionDelegate",
    "ExecutionResult",
    "Header",
    "Highlighter",
    "InMemoryClipboard",
    "InMemoryDisplay",
    "InlineAnnotation",
    "InlineCode",
    "InvalidLanguageError",
    "Italic",
    "LanguageResolver",
    "Link",
    "ModelCache",
    "Navigator",
    "NoBlockError",
    "NoPrimaryActionError",
    "OutputKind",
    "OverlayRenderer",
    "PromptFraming",
    "PygmentsHighlighter",
    "RangeArbiter",
    "RegexPromptFraming",
    "RenderError",
    "Snapshot",
    "SourceBlock",
    "Span",
    "StaleModelError",
    "Strikethrough",
    "SubprocessDelegate",
    "Transcript",
    "TranscriptBuffer",
    "__version__",
    "classify_output",
    "decorations_to_json",
    "from_json",
    "hash_config",
    "hash_content",
    "render",
    "rescan",
    "resolve",
    "to_json",
]
