"""Engine configuration for Bloques.

A single immutable EngineConfig is built by the host and passed explicitly to
the arbiter, renderer, dispatcher and transcript. Nothing reads configuration
from module globals.

Usage:
    config = EngineConfig(max_header_level=6, highlight_blocks=False)
    model = resolve(text, config=config)

    # From an external source (settings file, host preferences)
    config = EngineConfig.from_dict({"copy_glyph": "[copy]", "unknown": 1})

"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

# Placeholder expanded to a fresh temporary path when delegate params are built
TEMP_FILE_PLACEHOLDER = "<temp-file>"

DEFAULT_LANGUAGE_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "elisp": "emacs-lisp",
        "objective-c": "objc",
        "objectivec": "objc",
        "cpp": "c++",
        "py": "python",
        "python3": "python",
        "sh": "bash",
        "shell": "bash",
        "zsh": "bash",
        "js": "javascript",
        "node": "javascript",
        "rb": "ruby",
    }
)

DEFAULT_HEADER_OVERRIDES: Mapping[str, Mapping[str, str]] = MappingProxyType(
    {
        "dot": MappingProxyType({"file": f"{TEMP_FILE_PLACEHOLDER}.png"}),
        "plantuml": MappingProxyType({"file": f"{TEMP_FILE_PLACEHOLDER}.png"}),
        "ditaa": MappingProxyType({"file": f"{TEMP_FILE_PLACEHOLDER}.png"}),
    }
)

# Matches "ChatGPT> ", "Claude(opus)> " and similar shell prompts
DEFAULT_PROMPT_PATTERN = r"^[A-Za-z][\w.-]*(?:\([^)\n]*\))?> "


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Immutable engine configuration.

    Attributes:
        max_header_level: Deepest ATX header recognised (leading ``#`` count)
        language_aliases: Case-insensitive raw language token -> canonical id
        header_overrides: Per-language delegate parameter overrides
        prompt_pattern: Multiline regex locating prompt lines in the buffer
        copy_glyph: Text shown in place of an opening fence
        highlight_blocks: Delegate block bodies to the syntax highlighter
        confirm_execution: Ask before running a block through a delegate
        delegate_timeout: Seconds before an external process is killed

    """

    max_header_level: int = 8
    language_aliases: Mapping[str, str] = field(
        default_factory=lambda: DEFAULT_LANGUAGE_ALIASES
    )
    header_overrides: Mapping[str, Mapping[str, str]] = field(
        default_factory=lambda: DEFAULT_HEADER_OVERRIDES
    )
    prompt_pattern: str = DEFAULT_PROMPT_PATTERN
    copy_glyph: str = "⧉ "
    highlight_blocks: bool = True
    confirm_execution: bool = True
    delegate_timeout: float = 30.0

    def __post_init__(self) -> None:
        if self.max_header_level < 1:
            msg = f"max_header_level must be >= 1, got {self.max_header_level}"
            raise ValueError(msg)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "EngineConfig":
        """Create EngineConfig from dictionary.

        Only includes keys that are valid EngineConfig fields; unknown keys
        are silently ignored.

        Example:
            >>> config = EngineConfig.from_dict({
            ...     "max_header_level": 6,
            ...     "unknown_key": "ignored",
            ... })
            >>> config.max_header_level
            6

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        return cls(**filtered)


# Module-level default config (reused, never recreated)
DEFAULT_CONFIG: EngineConfig = EngineConfig()


__all__ = [
    "DEFAULT_CONFIG",
    "DEFAULT_HEADER_OVERRIDES",
    "DEFAULT_LANGUAGE_ALIASES",
    "DEFAULT_PROMPT_PATTERN",
    "TEMP_FILE_PLACEHOLDER",
    "EngineConfig",
]
