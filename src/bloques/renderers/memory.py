"""In-memory display host.

Records decorations instead of drawing them. Used by tests and by hosts that
post-process the decoration list themselves (for example to emit JSON to a
web view). ``visible_text`` projects what a real overlay host would show.
"""

from bloques.location import Span
from bloques.renderers.decorations import ActionBinding, Decoration, DecorationKind


class InMemoryDisplay:
    """Display host keeping decorations in a list.

    Thread Safety:
        Not thread-safe. Decorations are owned by the interaction thread.
    """

    __slots__ = ("_decorations", "clear_count")

    def __init__(self) -> None:
        self._decorations: list[Decoration] = []
        self.clear_count = 0

    def __len__(self) -> int:
        return len(self._decorations)

    @property
    def decorations(self) -> tuple[Decoration, ...]:
        return tuple(sorted(self._decorations, key=Decoration.sort_key))

    def clear_decorations(self, region: Span) -> None:
        self.clear_count += 1
        self._decorations = [d for d in self._decorations if not region.covers(d.span)]

    def add_decoration(self, decoration: Decoration) -> None:
        self._decorations.append(decoration)

    def faces_at(self, offset: int) -> list[str]:
        """Style names applied at offset."""
        return [
            d.face
            for d in self.decorations
            if d.kind is DecorationKind.FACE and d.face is not None and d.span.contains(offset)
        ]

    def actions_at(self, offset: int) -> list[ActionBinding]:
        """Actions bound at offset."""
        return [
            d.binding
            for d in self.decorations
            if d.kind is DecorationKind.ACTION and d.binding is not None and d.span.contains(offset)
        ]

    def visible_text(self, source: str) -> str:
        """Project the text a reader sees: hidden spans dropped, substitutions shown."""
        parts: list[str] = []
        pos = 0
        for decoration in self.decorations:
            if decoration.kind not in (DecorationKind.HIDE, DecorationKind.SUBSTITUTE):
                continue
            if decoration.span.start < pos:
                continue
            parts.append(source[pos : decoration.span.start])
            if decoration.kind is DecorationKind.SUBSTITUTE:
                parts.append(decoration.text or "")
            pos = decoration.span.end
        parts.append(source[pos:])
        return "".join(parts)
