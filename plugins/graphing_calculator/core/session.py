"""Plot session: the compiled expressions, evaluators and caches of one viewer.

A session is created empty, populated by :meth:`PlotSession.initialize` and
torn down by :meth:`PlotSession.reset`. It owns every piece of mutable state
for the plotted expressions; nothing is shared between sessions.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Sequence

from common.logging import get_logger

from .cache import Sample, SampleCache
from .compiler import CompiledExpression, compile_source
from .errors import LexError, ParseError, SessionError
from .evaluator import StackMachine, validate_angle_unit
from .settings import GraphingSettings

logger = get_logger("graphing_calculator.session")


@dataclass(frozen=True, slots=True)
class CompileOutcome:
    """Result of compiling one expression of an :meth:`initialize` batch."""

    expression: str
    ok: bool
    error: str | None = None


@dataclass(slots=True)
class PlottedExpression:
    index: int
    source: str
    program: CompiledExpression
    machine: StackMachine
    cache: SampleCache


@dataclass(frozen=True, slots=True)
class Series:
    """Samples of one expression over the requested viewport."""

    index: int
    expression: str
    step: float
    cached: bool
    samples: list[Sample] = field(default_factory=list)


class PlotSession:
    def __init__(self, settings: GraphingSettings | None = None, *, angle_unit: str = "radian") -> None:
        self.settings = settings or GraphingSettings()
        self._angle_unit = validate_angle_unit(angle_unit)
        self._step = self.settings.fine_step
        self._entries: list[PlottedExpression] = []

    @property
    def step(self) -> float:
        return self._step

    @property
    def epsilon(self) -> float:
        return self.settings.epsilon_for_step(self._step)

    @property
    def angle_unit(self) -> str:
        return self._angle_unit

    @property
    def expressions(self) -> list[str]:
        return [entry.source for entry in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    def cache_sizes(self) -> list[int]:
        return [len(entry.cache) for entry in self._entries]

    def initialize(self, expressions: Sequence[str]) -> list[CompileOutcome]:
        """Compile every expression, replacing the current ones.

        A failure only excludes that expression; the others still compile.
        """

        if len(expressions) > self.settings.max_expressions:
            raise SessionError(
                f"At most {self.settings.max_expressions} expressions can be plotted at once"
            )
        self.reset()
        outcomes: list[CompileOutcome] = []
        for index, source in enumerate(expressions):
            try:
                program = compile_source(source, self.epsilon)
            except (LexError, ParseError) as exc:
                logger.warning("rejected expression %r: %s", source, exc)
                outcomes.append(CompileOutcome(source, False, str(exc)))
                continue
            self._entries.append(
                PlottedExpression(
                    index=index,
                    source=source,
                    program=program,
                    machine=StackMachine(program, angle_unit=self._angle_unit),
                    cache=SampleCache(self.settings.max_cache_size),
                )
            )
            outcomes.append(CompileOutcome(source, True))
        logger.info("initialized %d of %d expressions", len(self._entries), len(expressions))
        return outcomes

    def reset(self) -> None:
        self._entries.clear()

    def invalidate(self) -> None:
        for entry in self._entries:
            entry.cache.invalidate()

    def _rebuild(self) -> None:
        epsilon = self.epsilon
        for entry in self._entries:
            entry.program = entry.program.with_epsilon(epsilon)
            entry.machine = StackMachine(entry.program, angle_unit=self._angle_unit)
            entry.cache.invalidate()

    def set_step(self, step: float) -> bool:
        """Switch the sampling step; every cache is dropped when it changes."""

        if step == self._step:
            return False
        logger.info("sampling step %g -> %g, invalidating caches", self._step, step)
        self._step = step
        self._rebuild()
        return True

    def set_angle_unit(self, angle_unit: str) -> bool:
        """Switch the trigonometric mode; every cache is dropped when it changes."""

        angle_unit = validate_angle_unit(angle_unit)
        if angle_unit == self._angle_unit:
            return False
        logger.info("angle unit %s -> %s, invalidating caches", self._angle_unit, angle_unit)
        self._angle_unit = angle_unit
        self._rebuild()
        return True

    def plot(self, x_start: float, x_end: float) -> list[Series]:
        """Return samples of every compiled expression across the viewport.

        The step follows the viewport width and the range is widened to whole
        units so neighbouring viewports land on the same cached window.
        """

        if not (math.isfinite(x_start) and math.isfinite(x_end)):
            raise SessionError("Viewport bounds must be finite")
        if x_end <= x_start:
            raise SessionError("x_end must be greater than x_start")
        self.set_step(self.settings.step_for_width(x_end - x_start))
        lo, hi = float(math.floor(x_start)), float(math.ceil(x_end))
        series: list[Series] = []
        for entry in self._entries:
            samples, hit = entry.cache.samples(lo, hi, self._step, entry.machine.evaluate)
            series.append(Series(entry.index, entry.source, self._step, hit, samples))
        return series

    def expand(self) -> list[int]:
        """Precompute samples on both sides of every non-empty cache."""

        steps = self.settings.expand_steps(self._step)
        for entry in self._entries:
            added = entry.cache.expand(steps, entry.machine.evaluate)
            if added:
                logger.debug("expanded cache %d by %d samples", entry.index, added)
        return self.cache_sizes()


__all__ = ["CompileOutcome", "PlotSession", "PlottedExpression", "Series"]
