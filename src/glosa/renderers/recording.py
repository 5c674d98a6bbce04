"""In-memory DecorationRenderer.

Keeps what a real editor would show: the live resources, the decorations
currently drawn with each, and the log of calls made. Used by the test-suite
and by hosts that forward decorations elsewhere (e.g. over JSON).

Thread Safety:
Not thread-safe; owned by one engine.

"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from itertools import count
from typing import Any

from glosa.colors import DecorationStyle
from glosa.nodes import ResolvedDecoration


@dataclass(frozen=True, slots=True)
class RenderHandle:
    """Handle issued by RecordingRenderer."""

    id: int
    color_key: str
    style: DecorationStyle


class RecordingRenderer:
    """DecorationRenderer that records instead of drawing.

    Attributes:
        calls: ``(method, color_key, payload)`` tuples in call order

    """

    __slots__ = ("_ids", "_live", "_drawn", "calls")

    def __init__(self) -> None:
        self._ids = count(1)
        self._live: dict[int, RenderHandle] = {}
        self._drawn: dict[int, tuple[ResolvedDecoration, ...]] = {}
        self.calls: list[tuple[str, str, Any]] = []

    def create_resource(self, color_key: str, style: DecorationStyle) -> RenderHandle:
        handle = RenderHandle(next(self._ids), color_key, style)
        self._live[handle.id] = handle
        self.calls.append(("create", color_key, style))
        return handle

    def set_decorations(
        self, handle: RenderHandle, decorations: Sequence[ResolvedDecoration]
    ) -> None:
        if handle.id not in self._live:
            raise KeyError(f"Unknown or released handle {handle.id}")
        self._drawn[handle.id] = tuple(decorations)
        self.calls.append(("set", handle.color_key, tuple(decorations)))

    def release_resource(self, handle: RenderHandle) -> None:
        if self._live.pop(handle.id, None) is None:
            raise KeyError(f"Unknown or released handle {handle.id}")
        self._drawn.pop(handle.id, None)
        self.calls.append(("release", handle.color_key, None))

    @property
    def live_handles(self) -> tuple[RenderHandle, ...]:
        return tuple(self._live.values())

    @property
    def live_color_keys(self) -> frozenset[str]:
        return frozenset(handle.color_key for handle in self._live.values())

    def drawn(self) -> dict[str, tuple[ResolvedDecoration, ...]]:
        """Non-empty batches currently drawn, keyed by color."""
        return {
            self._live[handle_id].color_key: batch
            for handle_id, batch in self._drawn.items()
            if batch and handle_id in self._live
        }

    def clear_calls(self) -> None:
        self.calls.clear()
