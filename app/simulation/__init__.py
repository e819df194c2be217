from .analysis_projector import AnalysisProjector, ProbeConfig
from .errors import (
    EngineError,
    InvalidMagnitude,
    InvalidUnitSuffix,
    MalformedBuffer,
    SimulationError,
    StrideError,
    UnresolvedPlaceholder,
    UnsupportedAnalysis,
)
from .netlist_builder import DEFAULT_TEMPLATE, NetlistBuilder
from .ngspice_runner import EngineResponse, NgspiceRunner
from .sample_buffer import SampleBuffer
from .unit_encoder import encode, encode_values

__all__ = [
    'AnalysisProjector',
    'ProbeConfig',
    'NetlistBuilder',
    'DEFAULT_TEMPLATE',
    'NgspiceRunner',
    'EngineResponse',
    'SampleBuffer',
    'encode',
    'encode_values',
    'SimulationError',
    'InvalidMagnitude',
    'InvalidUnitSuffix',
    'UnresolvedPlaceholder',
    'MalformedBuffer',
    'StrideError',
    'UnsupportedAnalysis',
    'EngineError',
]
