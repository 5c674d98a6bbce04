"""Configuration for glosa.

Two kinds of configuration live here:

- EngineConfig: immutable host-level settings (marker characters, comment
  prefix, debounce delay, palette size). Held in a ContextVar so a host can
  swap settings per context without threading them through every call.
- AnnotationConfig: the mutable ``@annotate-cfg`` state built up while a
  document is read top to bottom. Rebuilt from scratch on every pass.

Usage:
    # Host settings, typically loaded from a settings file
    config = EngineConfig.from_dict({"comment_prefix": "//"})
    with engine_config_context(config):
        engine = AnnotationEngine(document, renderer)

    # Directive state as of a given line
    state = config_at(document, line=42)
    state.clamp
    (0, 80)

Thread Safety:
    EngineConfig is frozen and the ContextVar is context-local, so no locks
    are needed. AnnotationConfig is owned by a single parse pass.

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from glosa.expression import Expression


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Immutable host-level settings.

    Attributes:
        marker_characters: First non-whitespace characters that make a line
            eligible for annotation matching
        comment_prefix: Comment leader used when inserting a new annotation
        debounce_seconds: Delay used to coalesce edit-triggered passes
        default_color_count: Size of the default color rotation
        inverse_search_slack: Extra raw columns searched when inverse-mapping
            a selection through rangeFn
        error_color: Color key of error annotations
        error_range_end: End column of error annotations (covers the line)

    """

    marker_characters: frozenset[str] = frozenset({"/", "#", "*"})
    comment_prefix: str = "#"
    debounce_seconds: float = 0.5
    default_color_count: int = 8
    inverse_search_slack: int = 0
    error_color: str = "red"
    error_range_end: int = 9999

    @classmethod
    def from_dict(cls, config_dict: dict) -> "EngineConfig":
        """Create EngineConfig from dictionary.

        Only includes keys that are valid EngineConfig fields; unknown keys
        are silently ignored. ``marker_characters`` may be given as any
        iterable of single characters (e.g. the string ``"/#*;"``).

        Args:
            config_dict: Dictionary with config values, e.g. host settings.

        Returns:
            New EngineConfig instance with values from dict.

        Example:
            >>> config = EngineConfig.from_dict({
            ...     "comment_prefix": "//",
            ...     "unknown_key": "ignored",
            ... })
            >>> config.comment_prefix
            '//'

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        if "marker_characters" in filtered:
            filtered["marker_characters"] = frozenset(filtered["marker_characters"])
        return cls(**filtered)


@dataclass(slots=True)
class AnnotationConfig:
    """Directive state applied to annotations parsed after it.

    A later ``@annotate-cfg`` overwrites the fields it names; fields it does
    not mention keep their values.

    Attributes:
        clamp: Lower and upper column bounds, or None
        range_fn: Compiled rangeFn formula, or None

    """

    clamp: tuple[int, int] | None = None
    range_fn: "Expression | None" = None

    def snapshot(self) -> "AnnotationConfig":
        """Return an independent copy for flush callbacks.

        Expressions are immutable, so a shallow copy is enough.
        """
        return replace(self)

    def reset(self) -> None:
        self.clamp = None
        self.range_fn = None


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: EngineConfig = EngineConfig()

_engine_config: ContextVar[EngineConfig] = ContextVar(
    "engine_config",
    default=_DEFAULT_CONFIG,
)


def get_engine_config() -> EngineConfig:
    """Get current engine configuration (context-local)."""
    return _engine_config.get()


def set_engine_config(config: EngineConfig) -> None:
    """Set engine configuration for current context.

    Args:
        config: EngineConfig instance to use for this context.

    """
    _engine_config.set(config)


def reset_engine_config() -> None:
    """Reset to default configuration.

    Reuses the module-level _DEFAULT_CONFIG singleton, avoiding allocation.
    """
    _engine_config.set(_DEFAULT_CONFIG)


@contextmanager
def engine_config_context(config: EngineConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Args:
        config: EngineConfig to use within the context.

    Example:
        >>> with engine_config_context(EngineConfig(comment_prefix="//")):
        ...     get_engine_config().comment_prefix
        '//'
        >>> get_engine_config().comment_prefix
        '#'

    Properly restores the previous config even if an exception is raised.
    """
    previous = _engine_config.get()
    _engine_config.set(config)
    try:
        yield
    finally:
        _engine_config.set(previous)


__all__ = [
    "AnnotationConfig",
    "EngineConfig",
    "engine_config_context",
    "get_engine_config",
    "reset_engine_config",
    "set_engine_config",
]
