"""
Projection chart rendering.

The chart is a value owned by whoever asked for it: ``projection_chart``
hands out a figure and releases it on exit, and ``render_chart_png``
turns a projection straight into a base64 PNG for embedding in the page.

Figures are built with ``matplotlib.figure.Figure`` rather than pyplot so
that concurrent requests never share pyplot's global figure registry.
"""

from __future__ import annotations

import base64
import io
import math
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, List, Optional

from matplotlib.figure import Figure
from matplotlib.ticker import FuncFormatter

from retirecalc.core.currency import format_axis_money
from retirecalc.schemas.plan import ProjectionResult

ACCUMULATION_COLOR = "#2AA7A1"
RETIREMENT_COLOR = "#E06B5A"
FILL_ALPHA = 0.15

WEB_W, WEB_H = 10, 5


@dataclass
class ChartSeries:
    labels: List[int]
    accumulation: List[Optional[float]]
    retirement: List[Optional[float]]


def _plottable(value: Optional[float]) -> Optional[float]:
    # inf/NaN would break axis autoscaling; leave a gap instead
    if value is None or not math.isfinite(value):
        return None
    return value


def chart_series(results: ProjectionResult) -> ChartSeries:
    """Align both phases on one age axis, with gaps where a phase has no point."""
    labels = list(results.ages) + list(results.retireAges)
    acc_by_age = dict(zip(results.ages, results.balances))
    ret_by_age = dict(zip(results.retireAges, results.retireBalances))

    return ChartSeries(
        labels=labels,
        accumulation=[_plottable(acc_by_age.get(age)) for age in labels],
        retirement=[_plottable(ret_by_age.get(age)) for age in labels],
    )


def _plot_phase(ax, labels: List[int], values: List[Optional[float]], color: str, label: str) -> None:
    points = [(age, value) for age, value in zip(labels, values) if value is not None]
    if not points:
        return
    xs = [age for age, _ in points]
    ys = [value for _, value in points]
    ax.plot(xs, ys, color=color, linewidth=2.2, label=label)
    ax.fill_between(xs, ys, color=color, alpha=FILL_ALPHA)


def build_projection_figure(results: ProjectionResult, currency: str = "USD", figsize=(WEB_W, WEB_H)) -> Figure:
    series = chart_series(results)

    fig = Figure(figsize=figsize, layout="constrained")
    ax = fig.subplots()
    _plot_phase(ax, series.labels, series.accumulation, ACCUMULATION_COLOR, "Accumulation Phase")
    _plot_phase(ax, series.labels, series.retirement, RETIREMENT_COLOR, "Retirement Phase")

    ax.yaxis.set_major_formatter(FuncFormatter(lambda value, _: format_axis_money(value, currency)))
    ax.set_xlabel("Age")
    ax.grid(axis="y", alpha=0.3)
    for side in ("top", "right"):
        ax.spines[side].set_visible(False)

    return fig


@contextmanager
def projection_chart(results: ProjectionResult, currency: str = "USD") -> Iterator[Figure]:
    """Yield a freshly drawn figure and release it afterwards."""
    fig = build_projection_figure(results, currency)
    try:
        yield fig
    finally:
        fig.clear()


def figure_to_base64(fig: Figure) -> str:
    """Convert a matplotlib figure to a base64-encoded PNG string."""
    buf = io.BytesIO()
    fig.savefig(buf, format="png", dpi=110, bbox_inches="tight")
    buf.seek(0)
    b64 = base64.b64encode(buf.read()).decode()
    buf.close()
    return b64


def render_chart_png(results: ProjectionResult, currency: str = "USD") -> str:
    with projection_chart(results, currency) as fig:
        return figure_to_base64(fig)
