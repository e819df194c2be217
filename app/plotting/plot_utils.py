"""
plotting/plot_utils.py

Renders a PlotSeries with matplotlib. The x axis is labelled through
axis_format: log10(f) ticks for frequency sweeps, SI time labels for
transients.
"""

import logging
from typing import Optional

import matplotlib

matplotlib.use("Agg")

from matplotlib.figure import Figure  # noqa: E402
from matplotlib.ticker import FuncFormatter, MultipleLocator  # noqa: E402

from models.analysis_result import AnalysisKind, PlotSeries  # noqa: E402

from .axis_format import format_log_frequency_tick, format_time  # noqa: E402

logger = logging.getLogger(__name__)


def frequency_tick_formatter() -> FuncFormatter:
    return FuncFormatter(lambda value, _pos: format_log_frequency_tick(value))


def time_tick_formatter() -> FuncFormatter:
    return FuncFormatter(lambda value, _pos: format_time(value))


def plot_series(series: PlotSeries, title: Optional[str] = None) -> Figure:
    """Build a figure for one series."""
    fig = Figure(figsize=(8, 4.5))
    ax = fig.add_subplot(111)
    ax.plot(series.x, series.y, linewidth=1.5, label=series.label)

    if series.kind is AnalysisKind.FREQUENCY_SWEEP:
        # One tick per decade
        ax.xaxis.set_major_locator(MultipleLocator(1.0))
        ax.xaxis.set_major_formatter(frequency_tick_formatter())
        ax.set_xlabel("Frequency")
        ax.set_ylabel("Magnitude (dB)")
    else:
        # No margin: ticks left of t = 0 would all read "0"
        ax.margins(x=0)
        ax.xaxis.set_major_formatter(time_tick_formatter())
        ax.set_xlabel("Time")
        ax.set_ylabel("Voltage (V)")

    ax.set_title(title or series.label)
    ax.legend()
    ax.grid(alpha=0.3)
    fig.tight_layout()
    return fig


def save_plot(series: PlotSeries, path: str, title: Optional[str] = None) -> str:
    """Render *series* to an image file; the format follows the extension."""
    fig = plot_series(series, title)
    fig.savefig(path, dpi=150, facecolor="white", edgecolor="none", bbox_inches="tight")
    logger.info("Plot written to %s", path)
    return path
