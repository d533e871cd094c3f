"""Renderers turning a BlockModel into display decorations."""

from bloques.renderers.decorations import (
    ActionBinding,
    Decoration,
    DecorationKind,
    header_face,
)
from bloques.renderers.memory import InMemoryDisplay
from bloques.renderers.overlay import OverlayRenderer
from bloques.renderers.protocol import DisplayHost

__all__ = [
    "ActionBinding",
    "Decoration",
    "DecorationKind",
    "DisplayHost",
    "InMemoryDisplay",
    "OverlayRenderer",
    "header_face",
]
