"""Color assignment and per-color decoration batches.

Colors:
    An annotation with ``[color]`` keeps it. Others rotate through
    ``default0`` .. ``default7``, counting only uncolored decorations of one
    anchor's batch and restarting at ``default0`` for the next anchor.

Registry:
    Each color key owns exactly one render resource. Resources are created
    lazily the first time a pass produces a decoration for the key, reused
    by later passes, and released once a pass produces none for it. The
    registry belongs to a single document surface; nothing is shared
    between documents.

Thread Safety:
    Not thread-safe. A surface's registry is only touched by that surface's
    passes, which never interleave.

"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from glosa.config import get_engine_config
from glosa.nodes import ResolvedDecoration
from glosa.resolver import Resolution, make_decoration
from glosa.utils.logger import get_logger

if TYPE_CHECKING:
    from glosa.renderers.protocol import DecorationRenderer

logger = get_logger(__name__)

DEFAULT_COLOR_PREFIX = "default"
THEME_COLOR_PREFIX = "glosa.defaultColor"


@dataclass(frozen=True, slots=True)
class DecorationStyle:
    """How a color key is drawn.

    Default keys point at a theme color id so the palette follows the
    host's theme; explicit keys use the color as written.
    """

    background_color: str | None = None
    background_theme_color: str | None = None
    border_width: str = "1px"
    border_style: str = "solid"
    border_color: str = "#ffffff50"


def default_color_key(index: int) -> str:
    return f"{DEFAULT_COLOR_PREFIX}{index}"


def style_for_color(color_key: str) -> DecorationStyle:
    """Build the decoration style for a color key.

    Example:
        >>> style_for_color("default3").background_theme_color
        'glosa.defaultColor3'
        >>> style_for_color("#ff000040").background_color
        '#ff000040'
    """
    if color_key.startswith(DEFAULT_COLOR_PREFIX):
        suffix = color_key[len(DEFAULT_COLOR_PREFIX) :]
        index = int(suffix) if suffix.isdigit() else 0
        return DecorationStyle(background_theme_color=f"{THEME_COLOR_PREFIX}{index}")
    return DecorationStyle(background_color=color_key)


class ColorAssigner:
    """Assign color keys to one anchor's resolved annotations."""

    __slots__ = ("_palette_size",)

    def __init__(self, palette_size: int | None = None) -> None:
        if palette_size is None:
            palette_size = get_engine_config().default_color_count
        if palette_size < 1:
            raise ValueError("palette_size must be at least 1")
        self._palette_size = palette_size

    def assign(self, resolutions: Iterable[Resolution]) -> list[ResolvedDecoration]:
        """Color one anchor batch, in arrival order.

        Dropped resolutions are skipped and do not advance the rotation.
        """
        decorations: list[ResolvedDecoration] = []
        default_index = 0
        for resolution in resolutions:
            if resolution.dropped:
                continue
            color = resolution.annotation.color
            if not color:
                color = default_color_key(default_index)
                default_index = (default_index + 1) % self._palette_size
            decorations.append(make_decoration(resolution, color))
        return decorations


@dataclass(slots=True)
class ColorGroup:
    """Render handle and the current pass's decorations for one color key."""

    color_key: str
    handle: Any
    decorations: list[ResolvedDecoration] = field(default_factory=list)


class ColorGroupRegistry:
    """Per-surface map from color key to render resource and batch.

    Usage:
        >>> registry = ColorGroupRegistry(renderer)
        >>> for decoration in decorations:
        ...     registry.add(decoration)
        >>> batches = registry.commit()  # renders, then recycles or releases

    """

    __slots__ = ("_renderer", "_groups", "_disposed")

    def __init__(self, renderer: DecorationRenderer) -> None:
        self._renderer = renderer
        self._groups: dict[str, ColorGroup] = {}
        self._disposed = False

    def add(self, decoration: ResolvedDecoration) -> None:
        """Route a decoration into its color group, creating it on first use."""
        if self._disposed:
            raise RuntimeError("ColorGroupRegistry has been disposed")
        group = self._groups.get(decoration.color)
        if group is None:
            handle = self._renderer.create_resource(
                decoration.color, style_for_color(decoration.color)
            )
            group = ColorGroup(decoration.color, handle)
            self._groups[decoration.color] = group
            logger.debug("Created render resource for %r", decoration.color)
        group.decorations.append(decoration)

    def extend(self, decorations: Iterable[ResolvedDecoration]) -> None:
        for decoration in decorations:
            self.add(decoration)

    def commit(self) -> dict[str, tuple[ResolvedDecoration, ...]]:
        """Hand every batch to the renderer and prepare for the next pass.

        Every color key is rendered, an empty batch clearing what the
        previous pass drew. Keys with decorations are kept with an emptied
        batch; keys without any have their resource released and are
        removed.

        Returns:
            The non-empty batches of this pass, keyed by color, in the order
            their keys were first created.
        """
        rendered: dict[str, tuple[ResolvedDecoration, ...]] = {}
        for color_key in list(self._groups):
            group = self._groups[color_key]
            batch = tuple(group.decorations)
            self._renderer.set_decorations(group.handle, batch)
            if batch:
                rendered[color_key] = batch
                group.decorations = []
            else:
                self._renderer.release_resource(group.handle)
                del self._groups[color_key]
                logger.debug("Released render resource for %r", color_key)
        return rendered

    def dispose(self) -> None:
        """Clear everything drawn and release every resource.

        Safe to call more than once.
        """
        for group in self._groups.values():
            self._renderer.set_decorations(group.handle, ())
            self._renderer.release_resource(group.handle)
        if self._groups:
            logger.debug("Released %d render resource(s)", len(self._groups))
        self._groups.clear()
        self._disposed = True

    @property
    def disposed(self) -> bool:
        return self._disposed

    def handle_for(self, color_key: str) -> Any:
        group = self._groups.get(color_key)
        return group.handle if group is not None else None

    def pending(self, color_key: str) -> Sequence[ResolvedDecoration]:
        group = self._groups.get(color_key)
        return tuple(group.decorations) if group is not None else ()

    def __contains__(self, color_key: object) -> bool:
        return color_key in self._groups

    def __iter__(self) -> Iterator[str]:
        return iter(self._groups)

    def __len__(self) -> int:
        return len(self._groups)
