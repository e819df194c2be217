"""
simulation/errors.py

Error types raised by the netlist encoding and result decoding pipeline.

Structural problems (bad user input, template mismatch, engine protocol
desync) are raised and propagate to the caller. Missing vectors are not
errors: the projector returns a NoDataResult instead.
"""


class SimulationError(Exception):
    """Base class for every error raised by the simulation pipeline."""


class InvalidMagnitude(SimulationError, ValueError):
    """A user-entered magnitude could not be parsed as a real number."""

    def __init__(self, magnitude: str, name: str = ""):
        self.magnitude = magnitude
        self.name = name
        where = f" for {name}" if name else ""
        super().__init__(f"Invalid magnitude{where}: {magnitude!r} is not a real number")


class InvalidUnitSuffix(SimulationError, ValueError):
    """A unit suffix is not one of the engine's scale factors."""

    def __init__(self, suffix: str, name: str = ""):
        self.suffix = suffix
        self.name = name
        where = f" for {name}" if name else ""
        super().__init__(f"Unknown unit suffix{where}: {suffix!r}")


class UnresolvedPlaceholder(SimulationError):
    """The template still references placeholders that have no value."""

    def __init__(self, names: list[str]):
        self.names = sorted(names)
        super().__init__("Unresolved netlist placeholder(s): " + ", ".join(self.names))


class MalformedBuffer(SimulationError):
    """The engine's flat sample buffer does not fit its declared grid."""


class StrideError(SimulationError):
    """Imaginary data requested from a real-valued run, or a bad stride."""


class UnsupportedAnalysis(SimulationError, ValueError):
    """The analysis command is not one of op, tran or ac."""


class EngineError(SimulationError):
    """The simulation engine could not be loaded or rejected the deck."""
