"""glosa PassAccumulator — opt-in profiling for annotation passes.

This module provides accumulated metrics across engine passes:
- Total profiling time
- Lines scanned
- Decorations and folding ranges produced

Zero overhead when disabled (get_pass_accumulator() returns None).

Example:
    from glosa.profiling import profiled_pass

    with profiled_pass() as metrics:
        engine.update()

    print(metrics.summary())
    # {"total_ms": 0.4, "passes": 1, "lines_scanned": 120, ...}

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from time import perf_counter
from typing import Any


@dataclass
class PassAccumulator:
    """Accumulated metrics across annotation passes.

    Attributes:
        start_time: Profiling start timestamp.
        passes: Number of full passes recorded.
        lines_scanned: Lines read by the annotation parser.
        decorations: Decorations handed to the renderer.
        folding_ranges: Folding ranges computed.

    """

    start_time: float = field(default_factory=perf_counter)
    passes: int = 0
    lines_scanned: int = 0
    decorations: int = 0
    folding_ranges: int = 0

    def record_pass(self, lines_scanned: int, decorations: int, folding_ranges: int) -> None:
        """Record one full pass."""
        self.passes += 1
        self.lines_scanned += lines_scanned
        self.decorations += decorations
        self.folding_ranges += folding_ranges

    @property
    def total_duration_ms(self) -> float:
        """Total profiling duration in milliseconds."""
        return (perf_counter() - self.start_time) * 1000

    def summary(self) -> dict[str, Any]:
        """Get summary of pass metrics."""
        return {
            "total_ms": round(self.total_duration_ms, 2),
            "passes": self.passes,
            "lines_scanned": self.lines_scanned,
            "decorations": self.decorations,
            "folding_ranges": self.folding_ranges,
        }


_accumulator: ContextVar[PassAccumulator | None] = ContextVar(
    "pass_accumulator",
    default=None,
)


def get_pass_accumulator() -> PassAccumulator | None:
    """Get current accumulator (None if profiling disabled)."""
    return _accumulator.get()


@contextmanager
def profiled_pass() -> Iterator[PassAccumulator]:
    """Context manager for profiled passes.

    Creates a PassAccumulator and makes it available via
    get_pass_accumulator() for the duration of the with block.

    Yields:
        PassAccumulator that will be populated by engine passes.

    """
    acc = PassAccumulator()
    token: Token[PassAccumulator | None] = _accumulator.set(acc)
    try:
        yield acc
    finally:
        _accumulator.reset(token)
