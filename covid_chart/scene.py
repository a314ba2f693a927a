"""Pure description of what the chart draws.

``build_scene`` maps (dataset, palette, dimensions) to a ``Scene`` holding
every drawn element in plot-area pixel coordinates. Hover state is part of
the scene too: ``highlight_bar`` and ``clear_highlight`` return new scenes
rather than mutating anything that was already drawn.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import timedelta
from decimal import ROUND_HALF_UP, Decimal

import pandas as pd

from covid_chart.data import Record, to_records
from covid_chart.layout import MARGIN, Dimensions, Margin
from covid_chart.palette import Palette
from covid_chart.scales import LinearScale, TimeScale

Y_PADDING_PERCENT = 110
LABEL_THRESHOLD = 0.2
BAR_GAP = 2
MIN_BAR_WIDTH = 2
LABEL_OFFSET = 5
Y_AXIS_TICKS = 5
TOOLTIP_WIDTH = 180
TOOLTIP_OFFSET = 10
X_LABEL_ANGLE = -45
X_TITLE = "Date"
Y_TITLE = "Daily New Cases"


@dataclass(frozen=True)
class Bar:
    record: Record
    x: float
    y: float
    width: float
    height: float
    fill: str
    stroke: str | None = None
    stroke_width: float = 0


@dataclass(frozen=True)
class BarLabel:
    x: float
    y: float
    text: str


@dataclass(frozen=True)
class Tick:
    value: object
    position: float
    label: str


@dataclass(frozen=True)
class Tooltip:
    x: float
    y: float
    title: str
    rows: tuple[tuple[str, str], ...]


@dataclass(frozen=True)
class Scene:
    dimensions: Dimensions
    margin: Margin
    palette: Palette
    x_scale: TimeScale
    y_scale: LinearScale
    gridlines: tuple[float, ...]
    x_ticks: tuple[Tick, ...]
    y_ticks: tuple[Tick, ...]
    bars: tuple[Bar, ...]
    labels: tuple[BarLabel, ...]
    x_title: str = X_TITLE
    y_title: str = Y_TITLE
    x_label_angle: int = X_LABEL_ANGLE
    highlighted: int | None = None
    tooltip: Tooltip | None = None

    @property
    def canvas_width(self) -> float:
        return self.dimensions.width + self.margin.left + self.margin.right

    @property
    def canvas_height(self) -> float:
        return self.dimensions.height + self.margin.top + self.margin.bottom


def format_thousands(value: float) -> str:
    """Axis style: 500 -> '0.5k', 2000 -> '2k'."""
    return f"{value / 1000:g}k"


def format_bar_value(value: int) -> str:
    """Bar label style, rounded to whole thousands: 2500 -> '3k'."""
    thousands = (Decimal(value) / 1000).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    return f"{thousands}k"


def bar_width(plot_width: float, count: int) -> float:
    return max(plot_width / count - BAR_GAP, MIN_BAR_WIDTH)


def y_domain_max(max_cases: int) -> float:
    if max_cases <= 0:
        return 1.0
    return max_cases * Y_PADDING_PERCENT / 100


def tooltip_position(
    pointer_x: float,
    pointer_y: float,
    viewport_width: float,
    tooltip_width: float = TOOLTIP_WIDTH,
) -> tuple[float, float]:
    """Place the tooltip right of the pointer, or left of it if it would overflow."""
    x = pointer_x + TOOLTIP_OFFSET
    if x + tooltip_width > viewport_width:
        x = pointer_x - tooltip_width - TOOLTIP_OFFSET
    return x, pointer_y - TOOLTIP_OFFSET


def tooltip_for(record: Record, x: float, y: float) -> Tooltip:
    return Tooltip(
        x=x,
        y=y,
        title=record.date.strftime("%B %d, %Y"),
        rows=(
            ("New Cases:", f"{record.new_cases:,}"),
            ("Deaths:", f"{record.new_deaths:,}"),
        ),
    )


def build_scene(
    dataset: pd.DataFrame,
    palette: Palette,
    dimensions: Dimensions,
    margin: Margin = MARGIN,
) -> Scene | None:
    records = to_records(dataset)
    if not records:
        return None

    width, height = dimensions.width, dimensions.height
    first, last = records[0].date, records[-1].date
    if first == last:
        first, last = first - timedelta(days=1), last + timedelta(days=1)
    x_scale = TimeScale((first, last), (0, width))

    max_cases = max(r.new_cases for r in records)
    y_scale = LinearScale((0, y_domain_max(max_cases)), (height, 0))

    step = bar_width(width, len(records))
    bars = tuple(
        Bar(
            record=r,
            x=x_scale(r.date),
            y=y_scale(r.new_cases),
            width=step,
            height=max(height - y_scale(r.new_cases), 0),
            fill=palette.bar,
        )
        for r in records
    )

    threshold = max_cases * LABEL_THRESHOLD
    labels = tuple(
        BarLabel(x=bar.x + step / 2, y=bar.y - LABEL_OFFSET, text=format_bar_value(bar.record.new_cases))
        for bar in bars
        if bar.record.new_cases > threshold
    )

    x_ticks = tuple(Tick(d, x_scale(d), d.strftime("%b %d")) for d in x_scale.ticks())
    y_ticks = tuple(Tick(v, y_scale(v), format_thousands(v)) for v in y_scale.ticks(Y_AXIS_TICKS))

    return Scene(
        dimensions=dimensions,
        margin=margin,
        palette=palette,
        x_scale=x_scale,
        y_scale=y_scale,
        gridlines=tuple(y_scale.ticks()),
        x_ticks=x_ticks,
        y_ticks=y_ticks,
        bars=bars,
        labels=labels,
    )


def bar_anchor(scene: Scene, index: int) -> tuple[float, float]:
    """Canvas position of the top center of a bar."""
    bar = scene.bars[index]
    return scene.margin.left + bar.x + bar.width / 2, scene.margin.top + bar.y


def highlight_bar(
    scene: Scene,
    index: int,
    pointer: tuple[float, float] | None = None,
    viewport_width: float | None = None,
) -> Scene:
    """Recolor bar ``index`` and show its tooltip next to ``pointer``.

    ``pointer`` and ``viewport_width`` are canvas pixels; they default to the
    bar's top center and the canvas width.
    """
    if not 0 <= index < len(scene.bars):
        raise IndexError(f"bar index {index} out of range for {len(scene.bars)} bars")

    scene = clear_highlight(scene)
    pointer_x, pointer_y = pointer if pointer is not None else bar_anchor(scene, index)
    x, y = tooltip_position(
        pointer_x,
        pointer_y,
        viewport_width if viewport_width is not None else scene.canvas_width,
    )

    bars = list(scene.bars)
    bars[index] = replace(bars[index], fill=scene.palette.hover, stroke="#fff", stroke_width=1)
    return replace(
        scene,
        bars=tuple(bars),
        highlighted=index,
        tooltip=tooltip_for(bars[index].record, x, y),
    )


def clear_highlight(scene: Scene) -> Scene:
    if scene.highlighted is None and scene.tooltip is None:
        return scene
    bars = tuple(replace(b, fill=scene.palette.bar, stroke=None, stroke_width=0) for b in scene.bars)
    return replace(scene, bars=bars, highlighted=None, tooltip=None)
