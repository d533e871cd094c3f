"""DisplayHost protocol: the overlay mechanism a renderer draws onto.

Any host (terminal UI, web view, native editor) that can clear decorations
over a region and add new ones conforms. The built-in ``InMemoryDisplay`` is
the reference implementation.

Example:
    from bloques.renderers.protocol import DisplayHost

    def redraw(host: DisplayHost, renderer: OverlayRenderer, model, text) -> None:
        renderer.render(model, text, host)

"""

from typing import Protocol

from bloques.location import Span
from bloques.renderers.decorations import Decoration


class DisplayHost(Protocol):
    """Protocol for decoration hosts.

    Decorations must be additive: the host never edits buffer text.

    """

    def clear_decorations(self, region: Span) -> None:
        """Remove every decoration lying within region."""
        ...

    def add_decoration(self, decoration: Decoration) -> None:
        """Apply one decoration."""
        ...
