"""Rendering collaborators for glosa.

The engine talks to the host through DecorationRenderer. RecordingRenderer
is the in-memory reference implementation.
"""

from glosa.renderers.protocol import DecorationRenderer
from glosa.renderers.recording import RecordingRenderer, RenderHandle

__all__ = [
    "DecorationRenderer",
    "RecordingRenderer",
    "RenderHandle",
]
