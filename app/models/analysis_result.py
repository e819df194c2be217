"""
Analysis results - immutable, display-ready output of one simulation run.

Pure Python data model. A result is built once per run
and replaced wholesale by the next run; nothing here is mutated afterwards.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional


class AnalysisKind(Enum):
    """The analyses the front end knows how to project."""

    OPERATING_POINT = "op"
    TRANSIENT = "tran"
    FREQUENCY_SWEEP = "ac"

    @classmethod
    def from_command(cls, command: str) -> "AnalysisKind":
        """Derive the kind from an engine command such as 'tran 0.1u 100u'."""
        from simulation.errors import UnsupportedAnalysis

        tokens = command.split()
        if not tokens:
            raise UnsupportedAnalysis("Empty analysis command")
        keyword = tokens[0].lower().lstrip(".")
        for kind in cls:
            if kind.value == keyword:
                return kind
        raise UnsupportedAnalysis(f"Unsupported analysis command: {command!r}")


@dataclass(frozen=True)
class PlotSeries:
    """One trace handed to the rendering layer.

    For frequency sweeps ``x`` already holds log10(frequency).
    """

    x: tuple[float, ...]
    y: tuple[float, ...]
    label: str
    kind: AnalysisKind

    def __post_init__(self):
        if len(self.x) != len(self.y):
            raise ValueError("Plot series x and y must have the same length")

    def __len__(self) -> int:
        return len(self.x)


@dataclass(frozen=True)
class AnalysisResult:
    """Base for every result variant: the kind plus its text report."""

    kind: AnalysisKind
    lines: tuple[str, ...] = ()

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    @property
    def has_data(self) -> bool:
        return True


@dataclass(frozen=True)
class OperatingPointResult(AnalysisResult):
    """Node voltages in volts and branch currents in milliamps.

    Both mappings are copied into read-only views on construction.
    """

    node_voltages: Mapping[str, float] = field(default_factory=dict)
    branch_currents_ma: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "node_voltages", MappingProxyType(dict(self.node_voltages)))
        object.__setattr__(self, "branch_currents_ma", MappingProxyType(dict(self.branch_currents_ma)))


@dataclass(frozen=True)
class TransientResult(AnalysisResult):
    time: tuple[float, ...] = ()
    voltage: tuple[float, ...] = ()
    vector_name: str = ""


@dataclass(frozen=True)
class FrequencySweepResult(AnalysisResult):
    """Magnitude in dB (-inf for zero power) and phase in degrees."""

    frequency: tuple[float, ...] = ()
    magnitude_db: tuple[float, ...] = ()
    phase_deg: tuple[float, ...] = ()
    vector_name: str = ""


@dataclass(frozen=True)
class NoDataResult(AnalysisResult):
    """Warning result: the run produced no usable samples.

    Carries the buffer diagnostics so the caller can tell the user what the
    engine actually returned.
    """

    missing: tuple[str, ...] = ()
    vector_count: int = 0
    stride: int = 0
    buffer_length: int = 0

    @property
    def has_data(self) -> bool:
        return False

    @property
    def message(self) -> str:
        return self.lines[0] if self.lines else ""


@dataclass(frozen=True)
class PublishedResult:
    """A completed result and its optional plot series, published together."""

    result: AnalysisResult
    series: Optional[PlotSeries] = None
    netlist: str = ""
    command: str = ""
