"""DecorationRenderer protocol — the host's drawing surface.

The engine never draws anything itself. It asks the host for one render
resource per color key, hands it the batch of decorations for that key after
every pass, and releases resources whose color disappeared.

Example:
    from glosa.renderers.protocol import DecorationRenderer

    def attach(renderer: DecorationRenderer, document: TextDocument) -> AnnotationEngine:
        return AnnotationEngine(document, renderer)

"""

from collections.abc import Sequence
from typing import Any, Protocol

from glosa.colors import DecorationStyle
from glosa.nodes import ResolvedDecoration


class DecorationRenderer(Protocol):
    """Protocol for host rendering surfaces.

    Handles are opaque to glosa; whatever create_resource returns is passed
    back verbatim.

    """

    def create_resource(self, color_key: str, style: DecorationStyle) -> Any:
        """Create the render resource for a color key.

        Args:
            color_key: Explicit color or ``default<N>``
            style: How decorations of this key are drawn

        Returns:
            Opaque handle.

        """
        ...

    def set_decorations(self, handle: Any, decorations: Sequence[ResolvedDecoration]) -> None:
        """Replace everything drawn with ``handle``; empty clears it."""
        ...

    def release_resource(self, handle: Any) -> None:
        """Free a resource. The handle is not used again."""
        ...
