"""Tests for SimulationController and ResultSlot."""

import threading
from unittest.mock import MagicMock

import pytest
from controllers.simulation_controller import ResultSlot, SimulationController
from models.analysis_result import (
    AnalysisKind,
    FrequencySweepResult,
    NoDataResult,
    OperatingPointResult,
    PublishedResult,
    TransientResult,
)
from models.component_value import ComponentValue
from simulation.errors import (
    EngineError,
    InvalidMagnitude,
    InvalidUnitSuffix,
    MalformedBuffer,
    UnresolvedPlaceholder,
)
from simulation.ngspice_runner import EngineResponse
from tests.conftest import FakeEngine


@pytest.fixture
def controller(fake_engine):
    return SimulationController(engine=fake_engine)


def _published(tag):
    return PublishedResult(result=TransientResult(kind=AnalysisKind.TRANSIENT, lines=(tag,)))


class TestResultSlot:
    def test_empty_snapshot(self):
        assert ResultSlot().snapshot() is None

    def test_publish_replaces_current(self):
        slot = ResultSlot()
        first, second = _published("a"), _published("b")
        slot.publish(first)
        slot.publish(second)
        assert slot.snapshot() is second

    def test_observer_notified(self):
        slot = ResultSlot()
        events = []
        slot.add_observer(lambda event, data: events.append((event, data)))
        published = _published("a")
        slot.publish(published)
        assert events == [("result_published", published)]

    def test_observer_added_once(self):
        slot = ResultSlot()
        callback = MagicMock()
        slot.add_observer(callback)
        slot.add_observer(callback)
        slot.publish(_published("a"))
        callback.assert_called_once()

    def test_remove_observer(self):
        slot = ResultSlot()
        callback = MagicMock()
        slot.add_observer(callback)
        slot.remove_observer(callback)
        slot.remove_observer(callback)
        slot.publish(_published("a"))
        callback.assert_not_called()

    def test_failing_observer_does_not_block_others(self):
        slot = ResultSlot()
        received = []
        slot.add_observer(MagicMock(side_effect=RuntimeError("widget gone")))
        slot.add_observer(lambda event, data: received.append(data))
        slot.publish(_published("a"))
        assert len(received) == 1

    def test_readers_see_whole_results(self):
        slot = ResultSlot()
        results = [_published(str(i)) for i in range(200)]
        seen = []

        def reader():
            for _ in range(200):
                snap = slot.snapshot()
                if snap is not None:
                    seen.append(snap)

        thread = threading.Thread(target=reader)
        thread.start()
        for r in results:
            slot.publish(r)
        thread.join()
        assert all(any(s is r for r in results) for s in seen)
        assert slot.snapshot() is results[-1]


class TestGenerateNetlist:
    def test_default_values(self, controller, component_values):
        netlist = controller.generate_netlist(component_values)
        assert "R1 1 2 1k" in netlist
        assert "L1 2 3 10m" in netlist

    def test_mega_is_encoded(self, controller, component_values):
        component_values["R2"] = ComponentValue("1", "M")
        assert "R2 3 4 1meg" in controller.generate_netlist(component_values)

    def test_missing_value(self, controller, component_values):
        del component_values["C1"]
        with pytest.raises(UnresolvedPlaceholder):
            controller.generate_netlist(component_values)


class TestRunAnalysis:
    def test_operating_point(self, controller, component_values):
        published = controller.run_analysis(component_values, "op")
        assert isinstance(published.result, OperatingPointResult)
        assert published.series is None
        assert published.command == "op"
        assert "R1 1 2 1k" in published.netlist
        assert controller.slot.snapshot() is published

    def test_transient_has_series(self, controller, component_values):
        published = controller.run_analysis(component_values, "tran 0.1u 100u")
        assert isinstance(published.result, TransientResult)
        assert published.series.kind is AnalysisKind.TRANSIENT

    def test_frequency_sweep(self, controller, component_values):
        published = controller.run_analysis(component_values, "ac dec 20 0.1 100meg")
        assert isinstance(published.result, FrequencySweepResult)
        assert len(published.series) == 2

    def test_engine_receives_netlist_and_command(self, controller, fake_engine, component_values):
        controller.run_analysis(component_values, "tran 0.1u 100u")
        netlist, command = fake_engine.calls[-1]
        assert command == "tran 0.1u 100u"
        assert "C1 2 0 100n" in netlist

    def test_missing_vectors_publish_no_data(self, component_values):
        controller = SimulationController(engine=FakeEngine({"op": (["v(2)"], [1.0])}))
        published = controller.run_analysis(component_values, "op")
        assert isinstance(published.result, NoDataResult)
        assert controller.slot.snapshot() is published

    def test_empty_run_publishes_no_data(self, component_values):
        controller = SimulationController(engine=FakeEngine())
        published = controller.run_analysis(component_values, "tran 0.1u 100u")
        assert isinstance(published.result, NoDataResult)
        assert published.series is None

    def test_bad_magnitude_keeps_previous_result(self, controller, component_values):
        first = controller.run_analysis(component_values, "op")
        component_values["R1"] = ComponentValue("abc", "k")
        with pytest.raises(InvalidMagnitude):
            controller.run_analysis(component_values, "op")
        assert controller.slot.snapshot() is first

    def test_malformed_buffer_raises(self, component_values):
        engine = MagicMock()
        engine.run.return_value = EngineResponse(summary="", vector_names=("a", "b"), stride=1, samples=(1.0, 2.0, 3.0))
        controller = SimulationController(engine=engine)
        with pytest.raises(MalformedBuffer):
            controller.run_analysis(component_values, "op")
        assert controller.slot.snapshot() is None

    def test_engine_error_propagates(self, component_values):
        engine = MagicMock()
        engine.run.side_effect = EngineError("ngspice shared library not found")
        controller = SimulationController(engine=engine)
        with pytest.raises(EngineError):
            controller.run_analysis(component_values, "op")

    def test_bad_values_never_reach_engine(self, controller, fake_engine, component_values):
        component_values["L1"] = ComponentValue("10", "x")
        with pytest.raises(InvalidUnitSuffix):
            controller.run_analysis(component_values, "op")
        assert fake_engine.calls == []

    def test_observer_sees_published_result(self, controller, component_values):
        events = []
        controller.slot.add_observer(lambda event, data: events.append(data))
        published = controller.run_analysis(component_values, "op")
        assert events == [published]

    def test_engine_created_lazily(self):
        controller = SimulationController()
        assert controller._engine is None
        from simulation.ngspice_runner import NgspiceRunner

        assert isinstance(controller.engine, NgspiceRunner)
