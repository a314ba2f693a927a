from __future__ import annotations

import math
from datetime import date

import pandas as pd
import plotly.graph_objects as go

from covid_chart.scene import TOOLTIP_WIDTH, Scene

MS_PER_DAY = 24 * 60 * 60 * 1000


def _ms_per_px(scene: Scene) -> float:
    start, stop = scene.x_scale.domain
    if scene.dimensions.width <= 0:
        return 0.0
    return (stop - start).days * MS_PER_DAY / scene.dimensions.width


def _timestamp_at(scene: Scene, px: float) -> pd.Timestamp:
    ordinal = scene.x_scale.invert(px)
    day = math.floor(ordinal)
    return pd.Timestamp(date.fromordinal(day)) + pd.Timedelta(days=ordinal - day)


def _tooltip_annotation(scene: Scene) -> dict:
    tip = scene.tooltip
    dims, margin = scene.dimensions, scene.margin
    rows = "<br>".join(f"{name} <b>{value}</b>" for name, value in tip.rows)
    return dict(
        text=f"<b>{tip.title}</b><br>{rows}",
        xref="paper",
        yref="paper",
        x=(tip.x - margin.left) / dims.width if dims.width else 0,
        y=1 - (tip.y - margin.top) / dims.height if dims.height else 1,
        xanchor="left",
        yanchor="top",
        align="left",
        showarrow=False,
        width=TOOLTIP_WIDTH,
        bgcolor=scene.palette.tooltip_bg,
        bordercolor=scene.palette.tooltip_border,
        borderwidth=1,
        borderpad=8,
        font=dict(color=scene.palette.text, size=13),
    )


def build_figure(scene: Scene, responsive: bool = False) -> go.Figure:
    """Translate a scene into a Plotly figure. A new figure is built every time."""
    palette = scene.palette
    ms_per_px = _ms_per_px(scene)
    bar_ms = [bar.width * ms_per_px for bar in scene.bars]

    fig = go.Figure()
    fig.add_trace(
        go.Bar(
            x=[pd.Timestamp(bar.record.date) for bar in scene.bars],
            y=[bar.record.new_cases for bar in scene.bars],
            width=bar_ms,
            offset=0,
            customdata=[bar.record.new_deaths for bar in scene.bars],
            marker=dict(
                color=[bar.fill for bar in scene.bars],
                line=dict(
                    color=[bar.stroke or bar.fill for bar in scene.bars],
                    width=[bar.stroke_width for bar in scene.bars],
                ),
                cornerradius=2,
            ),
            selected=dict(marker=dict(opacity=1)),
            unselected=dict(marker=dict(opacity=1)),
            hovertemplate=(
                "<b>%{x|%B %d, %Y}</b><br>"
                "New Cases: <b>%{y:,}</b><br>"
                "Deaths: <b>%{customdata:,}</b>"
                "<extra></extra>"
            ),
            name="New cases",
        )
    )

    if scene.labels:
        fig.add_trace(
            go.Scatter(
                x=[_timestamp_at(scene, label.x) for label in scene.labels],
                y=[scene.y_scale.invert(label.y) for label in scene.labels],
                text=[label.text for label in scene.labels],
                mode="text",
                textposition="top center",
                textfont=dict(size=10, color=palette.axis),
                hoverinfo="skip",
                showlegend=False,
                cliponaxis=False,
            )
        )

    x_start = pd.Timestamp(scene.x_scale.domain[0])
    bar_px = scene.bars[0].width if scene.bars else 0
    x_end = x_start + pd.Timedelta(milliseconds=(scene.dimensions.width + bar_px) * ms_per_px)

    gridlines = [
        dict(
            type="line",
            xref="paper",
            x0=0,
            x1=1,
            yref="y",
            y0=value,
            y1=value,
            line=dict(color=palette.grid, width=1),
            opacity=0.3,
            layer="below",
        )
        for value in scene.gridlines
    ]

    fig.update_layout(
        height=scene.canvas_height,
        margin=dict(
            l=scene.margin.left,
            r=scene.margin.right,
            t=scene.margin.top,
            b=scene.margin.bottom,
        ),
        paper_bgcolor=palette.card,
        plot_bgcolor=palette.card,
        font=dict(color=palette.axis),
        showlegend=False,
        shapes=gridlines,
        hoverlabel=dict(
            bgcolor=palette.tooltip_bg,
            bordercolor=palette.tooltip_border,
            font=dict(color=palette.text),
        ),
        xaxis=dict(
            type="date",
            range=[x_start, x_end],
            tickvals=[pd.Timestamp(t.value) for t in scene.x_ticks],
            ticktext=[t.label for t in scene.x_ticks],
            tickangle=scene.x_label_angle,
            ticks="outside",
            tickcolor=palette.axis,
            linecolor=palette.axis,
            showline=True,
            showgrid=False,
            fixedrange=True,
            title=dict(text=scene.x_title, font=dict(size=14)),
        ),
        yaxis=dict(
            range=list(scene.y_scale.domain),
            tickvals=[t.value for t in scene.y_ticks],
            ticktext=[t.label for t in scene.y_ticks],
            ticks="outside",
            tickcolor=palette.axis,
            linecolor=palette.axis,
            showline=True,
            showgrid=False,
            zeroline=False,
            fixedrange=True,
            title=dict(text=scene.y_title, font=dict(size=14)),
        ),
        annotations=[_tooltip_annotation(scene)] if scene.tooltip is not None else [],
    )
    if responsive:
        fig.update_layout(autosize=True)
    else:
        fig.update_layout(width=scene.canvas_width)
    return fig
