"""
Pure Python data models for DroidSpice.

This package contains immutable data classes for component
values and analysis results.
"""

from .analysis_result import (
    AnalysisKind,
    AnalysisResult,
    FrequencySweepResult,
    NoDataResult,
    OperatingPointResult,
    PlotSeries,
    PublishedResult,
    TransientResult,
)
from .component_value import ComponentValue

__all__ = [
    "AnalysisKind",
    "AnalysisResult",
    "ComponentValue",
    "FrequencySweepResult",
    "NoDataResult",
    "OperatingPointResult",
    "PlotSeries",
    "PublishedResult",
    "TransientResult",
]
