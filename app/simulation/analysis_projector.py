"""
simulation/analysis_projector.py

Derives display-ready results from a decoded SampleBuffer.

Each call is independent: the projector keeps only its probe configuration,
never anything from an earlier run. Missing vectors or an empty run give a
NoDataResult carrying buffer diagnostics rather than an exception.

Text precision is fixed: 6 decimals for seconds, 3 for volts, 2 for
milliamps and 1 for dB, degrees and hertz.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

from models.analysis_result import (
    AnalysisKind,
    AnalysisResult,
    FrequencySweepResult,
    NoDataResult,
    OperatingPointResult,
    PlotSeries,
    TransientResult,
)
from plotting.axis_format import log_frequency_axis

from .sample_buffer import SampleBuffer

logger = logging.getLogger(__name__)

# Engine currents are amperes; the report shows milliamps
AMPS_TO_MILLIAMPS = 1000.0

ZERO_POWER_DB = float("-inf")
ZERO_POWER_LABEL = "-∞"

TIME_VECTOR = "time"
FREQUENCY_VECTOR = "frequency"


@dataclass(frozen=True)
class ProbeConfig:
    """Which vectors the projector reads.

    Node names are bare ('2'); they are looked up as 'v(2)' and then '2'.
    Source and inductor names are element names ('V1', 'L1'); their
    currents are the '<name>#branch' vectors.
    """

    nodes: tuple[str, ...] = ("2", "4")
    source: str = "V1"
    inductor: str = "L1"
    target_node: str = "2"


def node_vector_names(node: str) -> tuple[str, str]:
    node = node.strip()
    return f"v({node})", node


def branch_vector_name(element: str) -> str:
    return f"{element.strip()}#branch"


def magnitude_db(real: float, imag: float) -> float:
    """10*log10(re^2 + im^2); zero power gives -inf, never NaN."""
    power = real * real + imag * imag
    if power > 0.0:
        return 10.0 * math.log10(power)
    return ZERO_POWER_DB


def phase_deg(real: float, imag: float) -> float:
    return math.atan2(imag, real) * 180.0 / math.pi


def format_db(value: float) -> str:
    """One decimal place; the zero-power sentinel prints as -∞."""
    if math.isinf(value) and value < 0:
        return ZERO_POWER_LABEL
    return f"{value:.1f}"


def format_transient_line(time: float, voltage: float) -> str:
    return f"{time:.6f} s, {voltage:.3f} V"


def format_ac_line(frequency: float, db: float, phase: float) -> str:
    return f"{frequency:.1f} Hz, {format_db(db)} dB, {phase:.1f}°"


class AnalysisProjector:
    """Projects a SampleBuffer onto the quantities each analysis reports."""

    def __init__(self, probes: Optional[ProbeConfig] = None):
        self.probes = probes or ProbeConfig()

    def project(self, kind: AnalysisKind, buffer: SampleBuffer) -> tuple[AnalysisResult, Optional[PlotSeries]]:
        """Return the result for *kind* and its plot series, if any."""
        if kind is AnalysisKind.OPERATING_POINT:
            return self.operating_point(buffer), None
        if kind is AnalysisKind.TRANSIENT:
            return self.transient(buffer)
        if kind is AnalysisKind.FREQUENCY_SWEEP:
            return self.frequency_sweep(buffer)
        raise ValueError(f"Unknown analysis kind: {kind}")

    # --- Operating point ---

    def operating_point(self, buffer: SampleBuffer) -> AnalysisResult:
        kind = AnalysisKind.OPERATING_POINT
        nodes = {node: self._find_node(buffer, node) for node in self.probes.nodes}
        branches = {
            element: buffer.index_of(branch_vector_name(element))
            for element in (self.probes.source, self.probes.inductor)
        }

        missing = [f"v({n})" for n, i in nodes.items() if i is None]
        missing += [branch_vector_name(e) for e, i in branches.items() if i is None]
        if missing or buffer.sample_count == 0:
            return self._no_data(kind, buffer, missing)

        node_voltages = {f"V({n})": buffer.real_at(0, i) for n, i in nodes.items()}
        currents_ma = {
            f"I({e.upper()})": buffer.real_at(0, i) * AMPS_TO_MILLIAMPS for e, i in branches.items()
        }

        lines = [f"{name} = {value:.3f} V" for name, value in node_voltages.items()]
        lines += [f"{name} = {value:.2f} mA" for name, value in currents_ma.items()]
        return OperatingPointResult(
            kind=kind,
            lines=tuple(lines),
            node_voltages=node_voltages,
            branch_currents_ma=currents_ma,
        )

    # --- Transient ---

    def transient(self, buffer: SampleBuffer) -> tuple[AnalysisResult, Optional[PlotSeries]]:
        kind = AnalysisKind.TRANSIENT
        time_index = buffer.index_of(TIME_VECTOR)
        target_index = self._find_node(buffer, self.probes.target_node)

        missing = []
        if time_index is None:
            missing.append(TIME_VECTOR)
        if target_index is None:
            missing.append(f"v({self.probes.target_node})")
        if missing or buffer.sample_count == 0:
            return self._no_data(kind, buffer, missing), None

        # Engine output is already in time order; it is not re-sorted
        time = tuple(float(t) for t in buffer.real(time_index))
        voltage = tuple(float(v) for v in buffer.real(target_index))
        name = buffer.vector_names[target_index].strip()

        result = TransientResult(
            kind=kind,
            lines=tuple(format_transient_line(t, v) for t, v in zip(time, voltage)),
            time=time,
            voltage=voltage,
            vector_name=name,
        )
        points = [(t, v) for t, v in zip(time, voltage) if t >= 0.0]
        series = PlotSeries(
            x=tuple(t for t, _ in points),
            y=tuple(v for _, v in points),
            label=f"{name} (V)",
            kind=kind,
        )
        return result, series

    # --- AC sweep ---

    def frequency_sweep(self, buffer: SampleBuffer) -> tuple[AnalysisResult, Optional[PlotSeries]]:
        kind = AnalysisKind.FREQUENCY_SWEEP
        freq_index = buffer.index_of(FREQUENCY_VECTOR)
        target_index = self._find_node(buffer, self.probes.target_node)

        missing = []
        if not buffer.is_complex:
            missing.append("complex data")
        if freq_index is None:
            missing.append(FREQUENCY_VECTOR)
        if target_index is None:
            missing.append(f"v({self.probes.target_node})")
        if missing or buffer.sample_count == 0:
            return self._no_data(kind, buffer, missing), None

        frequency = tuple(float(f) for f in buffer.real(freq_index))
        pairs = [(float(re), float(im)) for re, im in zip(buffer.real(target_index), buffer.imag(target_index))]
        db = tuple(magnitude_db(re, im) for re, im in pairs)
        phase = tuple(phase_deg(re, im) for re, im in pairs)
        name = buffer.vector_names[target_index].strip()

        result = FrequencySweepResult(
            kind=kind,
            lines=tuple(format_ac_line(f, d, p) for f, d, p in zip(frequency, db, phase)),
            frequency=frequency,
            magnitude_db=db,
            phase_deg=phase,
            vector_name=name,
        )
        xs, ys = log_frequency_axis(frequency, db)
        series = PlotSeries(x=tuple(xs), y=tuple(ys), label=f"|{name}| (dB)", kind=kind)
        return result, series

    # --- helpers ---

    @staticmethod
    def _find_node(buffer: SampleBuffer, node: str) -> Optional[int]:
        for name in node_vector_names(node):
            index = buffer.index_of(name)
            if index is not None:
                return index
        return None

    @staticmethod
    def _no_data(kind: AnalysisKind, buffer: SampleBuffer, missing: list[str]) -> NoDataResult:
        detail = f"missing {', '.join(missing)}" if missing else "no samples"
        message = f"No data for {kind.value} analysis ({detail}; {buffer.describe()})"
        logger.warning("%s", message)
        return NoDataResult(
            kind=kind,
            lines=(message,),
            missing=tuple(missing),
            vector_count=buffer.vector_count,
            stride=buffer.stride,
            buffer_length=buffer.buffer_length,
        )
