"""
Shared test fixtures for the DroidSpice test suite.

All fixtures build pure-Python objects; the ngspice engine is replaced by
FakeEngine so no shared library is needed.
"""

import sys
from pathlib import Path

# Ensure app/ is on sys.path so bare imports (models, simulation, controllers, plotting)
# work when running individual test files (e.g., python -m pytest app/tests/unit/test_foo.py).
_app_dir = str(Path(__file__).resolve().parent.parent)
if _app_dir not in sys.path:
    sys.path.insert(0, _app_dir)

import pytest
from simulation.ngspice_runner import EngineResponse, stride_for
from simulation.preset_manager import DEFAULT_COMPONENT_VALUES


class FakeEngine:
    """Stands in for NgspiceRunner: returns canned responses per analysis keyword."""

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []

    def run(self, netlist, command):
        self.calls.append((netlist, command))
        keyword = command.split()[0].lower()
        vector_names, samples = self.responses.get(keyword, ((), ()))
        return EngineResponse(
            summary=f"ran {command}",
            vector_names=tuple(vector_names),
            stride=stride_for(command),
            samples=tuple(samples),
        )


def op_response():
    """Operating point of the default RLC network with VS=5, R1=R2=R3=1k."""
    names = ["V(1)", "V(2)", "V(3)", "V(4)", "v1#branch", "l1#branch"]
    samples = [5.0, 2.5, 2.5, 1.25, -0.0025, 0.00125]
    return names, samples


def tran_response():
    names = ["time", "v(2)"]
    samples = [0.0, 5.0, 1e-6, 4.5]
    return names, samples


def ac_response():
    # frequency is complex in the engine's output with a zero imaginary part
    names = ["frequency", "v(2)"]
    samples = [
        0.0, 0.0, 1.0, 0.0,  # f = 0 Hz: dropped from the plot
        10.0, 0.0, 3.0, 4.0,  # |v| = 5 -> 13.98 dB
        100.0, 0.0, 0.0, 0.0,  # zero power
    ]
    return names, samples


@pytest.fixture
def component_values():
    return dict(DEFAULT_COMPONENT_VALUES)


@pytest.fixture
def fake_engine():
    return FakeEngine(
        {
            "op": op_response(),
            "tran": tran_response(),
            "ac": ac_response(),
        }
    )
