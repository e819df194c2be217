"""
SimulationController - Orchestrates the simulation pipeline.

This module has no UI dependencies. It coordinates value encoding,
netlist building, the engine call, buffer decoding and result projection,
then publishes the finished result through a ResultSlot.
"""

import logging
import threading
from typing import Any, Callable, Mapping, Optional

from models.analysis_result import AnalysisKind, PublishedResult
from models.component_value import ComponentValue
from simulation.analysis_projector import AnalysisProjector
from simulation.errors import SimulationError
from simulation.netlist_builder import NetlistBuilder
from simulation.sample_buffer import SampleBuffer
from simulation.unit_encoder import encode_values

logger = logging.getLogger(__name__)


class ResultSlot:
    """
    Holds the most recent published result.

    One writer (the controller) replaces the whole PublishedResult in a
    single step; readers take a snapshot and never see a half-built pair.

    Observer events:
        result_published (PublishedResult) - A new result replaced the old one
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._current: Optional[PublishedResult] = None
        self._observers: list[Callable[[str, Any], None]] = []

    def add_observer(self, callback: Callable[[str, Any], None]) -> None:
        """Register a callback for publish events."""
        if callback not in self._observers:
            self._observers.append(callback)

    def remove_observer(self, callback: Callable[[str, Any], None]) -> None:
        if callback in self._observers:
            self._observers.remove(callback)

    def publish(self, published: PublishedResult) -> None:
        with self._lock:
            self._current = published
        self._notify("result_published", published)

    def snapshot(self) -> Optional[PublishedResult]:
        with self._lock:
            return self._current

    def _notify(self, event: str, data: Any) -> None:
        for observer in self._observers:
            try:
                observer(event, data)
            except (TypeError, AttributeError, RuntimeError) as e:
                logger.error("Error notifying observer: %s", e)


class SimulationController:
    """
    Controller for the simulation pipeline.

    Coordinates: encode -> build netlist -> run engine -> decode -> project -> publish
    """

    def __init__(
        self,
        engine=None,
        builder: Optional[NetlistBuilder] = None,
        projector: Optional[AnalysisProjector] = None,
        slot: Optional[ResultSlot] = None,
    ):
        self._engine = engine
        self.builder = builder or NetlistBuilder()
        self.projector = projector or AnalysisProjector()
        self.slot = slot or ResultSlot()

    @property
    def engine(self):
        """Lazy initialization of NgspiceRunner."""
        if self._engine is None:
            from simulation.ngspice_runner import NgspiceRunner

            self._engine = NgspiceRunner()
        return self._engine

    def generate_netlist(self, values: Mapping[str, ComponentValue]) -> str:
        """Encode *values* and fill the template."""
        return self.builder.build(encode_values(values))

    def run_analysis(self, values: Mapping[str, ComponentValue], command: str) -> PublishedResult:
        """
        Run the full pipeline for one analysis command and publish the result.

        Structural errors (bad magnitude, unresolved placeholder, malformed
        buffer, engine failure) are logged and re-raised; the slot keeps the
        previous result. Missing vectors produce a published NoDataResult.
        """
        try:
            kind = AnalysisKind.from_command(command)
            netlist = self.generate_netlist(values)
            response = self.engine.run(netlist, command)
            buffer = SampleBuffer.from_response(response)
            result, series = self.projector.project(kind, buffer)
        except SimulationError as e:
            logger.error("Analysis '%s' failed: %s", command, e, exc_info=True)
            raise

        published = PublishedResult(result=result, series=series, netlist=netlist, command=command)
        self.slot.publish(published)
        logger.info("Published %s result (%d lines)", kind.value, len(result.lines))
        return published
