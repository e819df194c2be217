"""
Axis formatting and matplotlib rendering for analysis plot series.

plot_utils is not imported here so that axis formatting works without
a matplotlib backend.
"""

from .axis_format import format_frequency, format_log_frequency_tick, format_time, log_frequency_axis

__all__ = [
    "format_frequency",
    "format_log_frequency_tick",
    "format_time",
    "log_frequency_axis",
]
