"""
Controllers for DroidSpice.

This package contains the controller classes that run the analysis
pipeline and hand finished results to views through an observer pattern.
"""

from .simulation_controller import ResultSlot, SimulationController

__all__ = [
    "ResultSlot",
    "SimulationController",
]
