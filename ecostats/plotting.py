"""
Plotting module: typed plot specifications and figure rendering.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
import seaborn as sns
import statsmodels.api as sm

from . import config
from .errors import DataShapeError, InvalidParameter


class PlotKind(str, Enum):
    LINE = "line"
    SCATTER_TREND = "scatter+trend"
    BOX_JITTER = "boxplot+jitter"


class TrendMethod(str, Enum):
    NONE = "none"
    OLS = "ols"


@dataclass(frozen=True)
class PlotSpec:
    kind: PlotKind
    x: str
    y: str
    hue: Optional[str] = None
    xlabel: Optional[str] = None
    ylabel: Optional[str] = None
    title: str = ""
    trend: TrendMethod = TrendMethod.NONE

    def __post_init__(self):
        if not isinstance(self.kind, PlotKind):
            raise InvalidParameter(f"kind must be a PlotKind, got {self.kind!r}")
        if not isinstance(self.trend, TrendMethod):
            raise InvalidParameter(f"trend must be a TrendMethod, got {self.trend!r}")
        if not self.x or not self.y:
            raise InvalidParameter("x and y columns must be named")
        if self.trend is not TrendMethod.NONE and self.kind is not PlotKind.SCATTER_TREND:
            raise InvalidParameter(f"Trend lines are only drawn on {PlotKind.SCATTER_TREND.value} plots")
        if self.kind is PlotKind.BOX_JITTER and self.hue is not None:
            raise InvalidParameter("Box plots are colored by x; hue is not supported")


def _groups(frame, hue):
    """Yield (label, subset) per hue level in category order, or the whole frame."""
    if hue is None:
        yield None, frame
        return
    if isinstance(frame[hue].dtype, pd.CategoricalDtype):
        levels = frame[hue].cat.categories
    else:
        levels = sorted(frame[hue].unique())
    for level in levels:
        subset = frame[frame[hue] == level]
        if len(subset) > 0:
            yield level, subset


def ols_line(x, y):
    """Exact OLS fit of y on x; returns (xs, ys) spanning the range of x."""
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    results = sm.OLS(y, sm.add_constant(x, has_constant="add")).fit()
    xs = np.array([x.min(), x.max()])
    return xs, results.params[0] + results.params[1] * xs


def _draw_line(ax, frame, spec, palette):
    for (level, subset), color in zip(_groups(frame, spec.hue), palette):
        subset = subset.sort_values(spec.x)
        ax.plot(subset[spec.x], subset[spec.y], color=color, linewidth=1.5,
                marker="o", markersize=3, label=level)


def _draw_scatter_trend(ax, frame, spec, palette):
    for (level, subset), color in zip(_groups(frame, spec.hue), palette):
        ax.scatter(subset[spec.x], subset[spec.y], color=color, alpha=0.8, s=30, label=level)
        if spec.trend is TrendMethod.OLS and subset[spec.x].nunique() > 1:
            xs, ys = ols_line(subset[spec.x], subset[spec.y])
            ax.plot(xs, ys, color=color, linewidth=2)


def _draw_box_jitter(ax, frame, spec, rng):
    if not isinstance(frame[spec.x].dtype, pd.CategoricalDtype):
        raise InvalidParameter(f"Box plot x column '{spec.x}' must be categorical")

    order = list(frame[spec.x].cat.categories)
    values = [frame.loc[frame[spec.x] == level, spec.y].to_numpy() for level in order]
    ax.boxplot(values, positions=list(range(len(order))), widths=0.6, showfliers=False,
               patch_artist=True, boxprops={"facecolor": "0.9"}, medianprops={"color": "black"})
    ax.set_xticks(range(len(order)))
    ax.set_xticklabels(order)

    positions = frame[spec.x].cat.codes.to_numpy().astype(float)
    if rng is not None:
        positions = positions + rng.random(len(positions)) * 2 * config.JITTER_WIDTH - config.JITTER_WIDTH
    palette = sns.color_palette(n_colors=len(order))
    colors = [palette[code] for code in frame[spec.x].cat.codes]
    ax.scatter(positions, frame[spec.y], c=colors, alpha=0.8, s=20, zorder=3)


def render(dataset, specs, rng=None):
    """
    Build a figure from one plot spec, or side-by-side panels from several.

    Args:
        dataset: DataFrame holding every column the specs name
        specs: PlotSpec or sequence of PlotSpec (one panel each)
        rng: Random stream for box plot jitter; no jitter when None

    Returns:
        matplotlib.figure.Figure
    """
    if isinstance(specs, PlotSpec):
        specs = [specs]
    specs = list(specs)
    if not specs:
        raise InvalidParameter("At least one plot spec is required")

    for spec in specs:
        needed = [c for c in (spec.x, spec.y, spec.hue) if c is not None]
        missing = [c for c in needed if c not in dataset.columns]
        if missing:
            raise DataShapeError(f"Columns not found for {spec.kind.value} plot: {missing}")

    width, height = config.FIGURE_SIZE
    fig, axes = plt.subplots(1, len(specs), figsize=(width * len(specs), height), squeeze=False)

    for ax, spec in zip(axes[0], specs):
        n_levels = dataset[spec.hue].nunique() if spec.hue else 1
        palette = sns.color_palette(n_colors=max(n_levels, 1))

        if spec.kind is PlotKind.LINE:
            _draw_line(ax, dataset, spec, palette)
        elif spec.kind is PlotKind.SCATTER_TREND:
            _draw_scatter_trend(ax, dataset, spec, palette)
        else:
            _draw_box_jitter(ax, dataset, spec, rng)

        ax.set_xlabel(spec.xlabel or spec.x)
        ax.set_ylabel(spec.ylabel or spec.y)
        ax.set_title(spec.title)
        ax.grid(alpha=0.3)
        if spec.hue is not None:
            ax.legend(title=spec.hue)

    fig.tight_layout()
    return fig
