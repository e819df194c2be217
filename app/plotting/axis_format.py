"""
plotting/axis_format.py

SI-prefixed labels for chart axes. Pure functions, no state.

Frequency charts plot log10(f) on the x axis; the tick formatter converts
back with 10**value before labelling.
"""

import math
from typing import Iterable

# (threshold, divisor, unit), largest first
FREQUENCY_PREFIXES = [
    (1e9, 1e9, "GHz"),
    (1e6, 1e6, "MHz"),
    (1e3, 1e3, "kHz"),
]

# A unit is used from a tenth of its size up, so 5e-7 reads "0.50 µs"
TIME_PREFIXES = [
    (1e-1, 1.0, "s"),
    (1e-4, 1e-3, "ms"),
    (1e-7, 1e-6, "µs"),
    (1e-10, 1e-9, "ns"),
    (1e-13, 1e-12, "ps"),
]

# Anything at or below this is floating-point noise around zero
TIME_ZERO_THRESHOLD = 1e-18


def format_frequency(hz: float) -> str:
    """
    Label a frequency with the largest prefix it clears.

    The scaled value is truncated to an integer, which suits decade ticks.
    Examples: 1_500_000 -> "1MHz", 999 -> "999Hz"
    """
    for threshold, divisor, unit in FREQUENCY_PREFIXES:
        if hz >= threshold:
            return f"{int(hz / divisor)}{unit}"
    return f"{int(hz)}Hz"


def format_time(seconds: float) -> str:
    """
    Label a time value with two decimals and the largest prefix it clears.

    Values too small for picoseconds print in exponent form; anything at
    or below TIME_ZERO_THRESHOLD (including negative values) prints "0".

    Examples: 0.0000005 -> "0.50 µs", 0 -> "0"
    """
    for threshold, divisor, unit in TIME_PREFIXES:
        if seconds >= threshold:
            return f"{seconds / divisor:.2f} {unit}"
    if seconds <= TIME_ZERO_THRESHOLD:
        return "0"
    return f"{seconds:.2e} s"


def format_log_frequency_tick(value: float) -> str:
    """Label a tick on a log10(f) axis."""
    return format_frequency(10.0 ** value)


def log_frequency_axis(frequencies: Iterable[float], values: Iterable[float]) -> tuple[list[float], list[float]]:
    """
    Prepare a Bode-style series: x becomes log10(f).

    Non-positive frequencies have no logarithm and are dropped, not clamped.
    """
    xs, ys = [], []
    for f, y in zip(frequencies, values):
        if f > 0.0:
            xs.append(math.log10(f))
            ys.append(float(y))
    return xs, ys
