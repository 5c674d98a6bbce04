"""AnnotationSession — the host-facing entry point.

A host editor owns one session. The session keeps one AnnotationEngine per
open surface (each with its own color registry and renderer) and routes the
two host events to them:

- document changed: throttled pass on the active surface
- active surface changed: immediate pass on the new surface

Closing a surface releases everything it drew; shutdown releases all.

"""

from __future__ import annotations

from collections.abc import Callable, Hashable

from glosa.config import EngineConfig, get_engine_config
from glosa.document import TextDocument
from glosa.engine import AnnotationEngine, PassResult
from glosa.location import Selection
from glosa.renderers.protocol import DecorationRenderer
from glosa.scheduling import TimerFactory, UpdateScheduler
from glosa.snippet import InsertionRequest
from glosa.utils.logger import get_logger

logger = get_logger(__name__)

SurfaceId = Hashable


class AnnotationSession:
    """Per-host collection of annotation engines, one per surface.

    Usage:
        >>> session = AnnotationSession(lambda surface_id: RecordingRenderer())
        >>> session.open_surface("main.py", StringDocument(source))
        >>> session.on_active_surface_changed("main.py")   # immediate pass
        >>> session.on_document_changed("main.py", StringDocument(edited))
        >>> session.shutdown()

    """

    __slots__ = (
        "_renderer_factory",
        "_settings",
        "_engines",
        "_active",
        "_scheduler",
        "_last_result",
    )

    def __init__(
        self,
        renderer_factory: Callable[[SurfaceId], DecorationRenderer],
        *,
        engine_config: EngineConfig | None = None,
        timer_factory: TimerFactory | None = None,
    ) -> None:
        """Initialize session.

        Args:
            renderer_factory: Creates the renderer for a newly opened surface
            engine_config: Host settings (active EngineConfig when None)
            timer_factory: Timer used to coalesce edit triggers
        """
        self._renderer_factory = renderer_factory
        self._settings = engine_config or get_engine_config()
        self._engines: dict[SurfaceId, AnnotationEngine] = {}
        self._active: SurfaceId | None = None
        self._last_result: PassResult | None = None
        self._scheduler = UpdateScheduler(
            self._update_active,
            self._settings.debounce_seconds,
            timer_factory=timer_factory,
        )

    @property
    def active_surface(self) -> SurfaceId | None:
        return self._active

    @property
    def active_engine(self) -> AnnotationEngine | None:
        if self._active is None:
            return None
        return self._engines.get(self._active)

    @property
    def last_result(self) -> PassResult | None:
        """Result of the most recent pass on any surface."""
        return self._last_result

    @property
    def scheduler(self) -> UpdateScheduler:
        return self._scheduler

    def engine_for(self, surface_id: SurfaceId) -> AnnotationEngine | None:
        return self._engines.get(surface_id)

    def open_surface(self, surface_id: SurfaceId, document: TextDocument) -> AnnotationEngine:
        """Register a surface; returns its engine (existing one if already open)."""
        engine = self._engines.get(surface_id)
        if engine is None:
            engine = AnnotationEngine(
                document,
                self._renderer_factory(surface_id),
                engine_config=self._settings,
            )
            self._engines[surface_id] = engine
        else:
            engine.document = document
        return engine

    def on_active_surface_changed(
        self, surface_id: SurfaceId | None, document: TextDocument | None = None
    ) -> PassResult | None:
        """Switch the active surface and recompute it immediately.

        Args:
            surface_id: New active surface, or None when no editor is active
            document: Its document; required when the surface is not open yet

        Returns:
            The pass result for the new surface, None when no surface is active.

        Raises:
            KeyError: Surface is not open and no document was given.
        """
        if surface_id is not None and document is None and surface_id not in self._engines:
            raise KeyError(f"Surface {surface_id!r} is not open")
        self._scheduler.cancel()
        self._active = surface_id
        if surface_id is None:
            return None
        if document is not None:
            self.open_surface(surface_id, document)
        self._scheduler.trigger(throttle=False)
        return self._last_result

    def on_document_changed(self, surface_id: SurfaceId, document: TextDocument) -> None:
        """Record new document content; the active surface re-parses after the delay."""
        engine = self._engines.get(surface_id)
        if engine is None:
            return
        engine.document = document
        if surface_id == self._active:
            self._scheduler.trigger(throttle=True)

    def recompute(self) -> PassResult | None:
        """Recompute the active surface now, dropping any pending delayed pass."""
        self._scheduler.trigger(throttle=False)
        return self._last_result

    def annotate_selection(self, selection: Selection) -> InsertionRequest:
        """Build the annotation line for a selection on the active surface.

        Raises:
            LookupError: No surface is active.
            EmptySelectionError: Nothing is selected.
        """
        engine = self.active_engine
        if engine is None:
            raise LookupError("No active surface")
        return engine.annotate_selection(selection)

    def close_surface(self, surface_id: SurfaceId) -> None:
        """Dispose a surface's engine, releasing its render resources."""
        engine = self._engines.pop(surface_id, None)
        if surface_id == self._active:
            self._scheduler.cancel()
            self._active = None
        if engine is not None:
            engine.dispose()

    def shutdown(self) -> None:
        """Release every surface. The session can still open new surfaces."""
        self._scheduler.cancel()
        for surface_id in list(self._engines):
            self._engines.pop(surface_id).dispose()
        self._active = None
        logger.debug("Annotation session shut down")

    def _update_active(self) -> None:
        engine = self.active_engine
        if engine is None or engine.disposed:
            return
        self._last_result = engine.update()
