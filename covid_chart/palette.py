"""Light and dark color sets for the chart and its surrounding card."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Palette:
    name: str
    bar: str
    hover: str
    axis: str
    grid: str
    background: str
    card: str
    text: str
    tooltip_bg: str
    tooltip_border: str


LIGHT = Palette(
    name="light",
    bar="steelblue",
    hover="orange",
    axis="#374151",
    grid="#e5e7eb",
    background="#ffffff",
    card="#ffffff",
    text="#1f2937",
    tooltip_bg="#ffffff",
    tooltip_border="#e5e7eb",
)

DARK = Palette(
    name="dark",
    bar="#4f46e5",
    hover="#f59e0b",
    axis="#f3f4f6",
    grid="#4b5563",
    background="#111827",
    card="#1f2937",
    text="#f3f4f6",
    tooltip_bg="#1f2937",
    tooltip_border="#374151",
)


def palette_for(dark_mode: bool) -> Palette:
    return DARK if dark_mode else LIGHT
