"""Configuration helpers for the graphing calculator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping


@dataclass(frozen=True)
class GraphingSettings:
    fine_step: float = 1 / 1024
    coarse_step: float = 1 / 512
    width_threshold: float = 20.0
    epsilon_ratio: float = 0.5
    max_cache_size: int = 100_000
    expand_span: float = 1.0
    max_viewport_width: float = 200.0
    max_expressions: int = 16

    def step_for_width(self, width: float) -> float:
        """Coarse sampling for wide viewports, fine sampling otherwise."""

        return self.coarse_step if width > self.width_threshold else self.fine_step

    def epsilon_for_step(self, step: float) -> float:
        return step * self.epsilon_ratio

    def expand_steps(self, step: float) -> int:
        return max(1, int(self.expand_span / step))


def _positive_float(raw: Mapping[str, object], key: str, default: float) -> float:
    try:
        value = float(raw.get(key, default))  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


def _positive_int(raw: Mapping[str, object], key: str, default: int) -> int:
    try:
        value = int(float(raw.get(key, default)))  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    return max(value, 1)


def load_settings(raw: Mapping[str, object] | None) -> GraphingSettings:
    raw = raw or {}
    defaults = GraphingSettings()
    fine_step = _positive_float(raw, "fine_step", defaults.fine_step)
    coarse_step = _positive_float(raw, "coarse_step", defaults.coarse_step)
    if coarse_step < fine_step:
        coarse_step = fine_step

    epsilon_ratio = defaults.epsilon_ratio
    try:
        epsilon_ratio = max(0.0, float(raw.get("epsilon_ratio", epsilon_ratio)))  # type: ignore[arg-type]
    except (TypeError, ValueError):
        pass

    return GraphingSettings(
        fine_step=fine_step,
        coarse_step=coarse_step,
        width_threshold=_positive_float(raw, "width_threshold", defaults.width_threshold),
        epsilon_ratio=epsilon_ratio,
        max_cache_size=_positive_int(raw, "max_cache_size", defaults.max_cache_size),
        expand_span=_positive_float(raw, "expand_span", defaults.expand_span),
        max_viewport_width=_positive_float(raw, "max_viewport_width", defaults.max_viewport_width),
        max_expressions=_positive_int(raw, "max_expressions", defaults.max_expressions),
    )


__all__ = ["GraphingSettings", "load_settings"]
