"""Contiguous fixed-step sample cache for one compiled expression."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Optional

from .errors import CacheMiss

Evaluate = Callable[[float], Optional[float]]

DEFAULT_MAX_SIZE = 100_000
# Grid arithmetic tolerance, as a fraction of one step.
_TOLERANCE = 1e-9


@dataclass(frozen=True, slots=True)
class Sample:
    x: float
    y: float | None


class SampleCache:
    """Ordered window of samples at a uniform step.

    Sample ``i`` of the window sits at ``origin + (first_index + i) * step``
    where ``origin`` is the ``x_start`` of the last :meth:`fill`. Positions
    are always derived from their integer grid index, never accumulated, so
    expanding the window reproduces exactly the values a fresh fill over the
    same grid would compute.
    """

    def __init__(self, max_size: int = DEFAULT_MAX_SIZE) -> None:
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self._samples: list[Sample] = []
        self._origin = 0.0
        self._first_index = 0
        self._step: float | None = None

    def __len__(self) -> int:
        return len(self._samples)

    def __bool__(self) -> bool:
        return bool(self._samples)

    @property
    def step(self) -> float | None:
        return self._step if self._samples else None

    @property
    def bounds(self) -> tuple[float, float] | None:
        if not self._samples:
            return None
        return self._samples[0].x, self._samples[-1].x

    def _position(self, index: int) -> float:
        return self._origin + index * self._step

    def _sample(self, index: int, evaluate: Evaluate) -> Sample:
        x = self._position(index)
        return Sample(x, evaluate(x))

    def covers(self, x_start: float, x_end: float) -> bool:
        """True when the stored window spans ``[x_start, x_end]``."""

        if not self._samples:
            return False
        slack = self._step * _TOLERANCE
        return self._samples[0].x <= x_start + slack and self._samples[-1].x >= x_end - slack

    def query(self, x_start: float, x_end: float, step: float) -> list[Sample]:
        """Return the stored samples lying in ``[x_start, x_end]``."""

        if step != self._step or not self.covers(x_start, x_end):
            raise CacheMiss(f"Cache does not cover [{x_start}, {x_end}] at step {step}")
        first_x = self._samples[0].x
        lo = max(0, math.ceil((x_start - first_x) / step - _TOLERANCE))
        hi = min(len(self._samples) - 1, math.floor((x_end - first_x) / step + _TOLERANCE))
        return self._samples[lo : hi + 1]

    def fill(self, x_start: float, x_end: float, step: float, evaluate: Evaluate) -> int:
        """Discard the window and sample ``[x_start, x_end]`` from scratch.

        The grid is extended to the first point at or past ``x_end`` so the
        new window always covers the requested range. Returns the sample count.
        """

        if not step > 0 or not math.isfinite(step):
            raise ValueError("step must be a positive finite number")
        if not (math.isfinite(x_start) and math.isfinite(x_end)) or x_end < x_start:
            raise ValueError("x_end must be a finite value no smaller than x_start")
        self._origin = x_start
        self._first_index = 0
        self._step = step
        count = math.ceil((x_end - x_start) / step - _TOLERANCE) + 1
        self._samples = [self._sample(index, evaluate) for index in range(count)]
        return count

    def expand(self, steps: int, evaluate: Evaluate) -> int:
        """Grow the window by ``steps`` samples on each side.

        Does nothing for an empty window or one already at ``max_size``.
        Returns the number of samples added.
        """

        if steps <= 0 or not self._samples or len(self._samples) >= self.max_size:
            return 0
        first = self._first_index
        last = first + len(self._samples) - 1
        before = [self._sample(index, evaluate) for index in range(first - steps, first)]
        after = [self._sample(index, evaluate) for index in range(last + 1, last + steps + 1)]
        self._samples = before + self._samples + after
        self._first_index = first - steps
        return len(before) + len(after)

    def samples(
        self, x_start: float, x_end: float, step: float, evaluate: Evaluate
    ) -> tuple[list[Sample], bool]:
        """Serve ``[x_start, x_end]`` from the window, refilling on a miss.

        Returns the samples and whether they came from the existing window.
        """

        hit = step == self._step and self.covers(x_start, x_end)
        if not hit:
            self.fill(x_start, x_end, step, evaluate)
        return self.query(x_start, x_end, step), hit

    def invalidate(self) -> None:
        self._samples = []
        self._first_index = 0
        self._step = None


__all__ = ["DEFAULT_MAX_SIZE", "Sample", "SampleCache"]
