from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from covid_chart.config import ChartConfig

MAX_MEASURED_HEIGHT = 600
MEASURED_ASPECT = 0.6


@dataclass(frozen=True)
class Margin:
    top: int = 40
    right: int = 40
    bottom: int = 80
    left: int = 80


@dataclass(frozen=True)
class Dimensions:
    """Plot area size, i.e. the canvas minus its margins."""

    width: float
    height: float


MARGIN = Margin()


def bounded(canvas_width: float, canvas_height: float, margin: Margin = MARGIN) -> Dimensions:
    return Dimensions(
        width=max(canvas_width - margin.left - margin.right, 0),
        height=max(canvas_height - margin.top - margin.bottom, 0),
    )


@dataclass(frozen=True)
class FixedLayout:
    width: int = 1200
    height: int = 600
    margin: Margin = MARGIN
    responsive = False

    def dimensions(self) -> Dimensions:
        return bounded(self.width, self.height, self.margin)


@dataclass(frozen=True)
class MeasuredLayout:
    """Sizes the canvas from the container width reported by ``measure``.

    Height follows the width (60%) but never exceeds 600px.
    """

    measure: Callable[[], float]
    margin: Margin = MARGIN
    responsive = True

    def dimensions(self) -> Dimensions:
        width = float(self.measure())
        height = min(MAX_MEASURED_HEIGHT, width * MEASURED_ASPECT)
        return bounded(width, height, self.margin)


def layout_for(config: ChartConfig):
    if config.layout == "responsive":
        return MeasuredLayout(measure=lambda: config.container_width)
    return FixedLayout(width=config.canvas_width, height=config.canvas_height)
