"""
simulation/sample_buffer.py

Decodes the flat sample buffer the engine produces for one run.

The engine streams one row per accepted point: every vector's value for
that point, real and imaginary parts interleaved when the run is complex.

    stride=1: [s0v0, s0v1, ... s0vN-1, s1v0, ...]
    stride=2: [s0v0R, s0v0I, s0v1R, s0v1I, ...]

The buffer is reshaped once into a (samples, vectors, stride) array, so the
offset arithmetic lives only in the constructor.
"""

from typing import Optional, Sequence

import numpy as np

from .errors import MalformedBuffer, StrideError

REAL_STRIDE = 1
COMPLEX_STRIDE = 2


def _lookup_key(name: str) -> str:
    return name.strip().lower()


class SampleBuffer:
    """Per-vector, per-sample view over one run's output."""

    def __init__(self, vector_names: Sequence[str], stride: int, samples: Sequence[float]):
        if stride not in (REAL_STRIDE, COMPLEX_STRIDE):
            raise StrideError(f"Stride must be 1 or 2, got {stride}")

        self.vector_names = tuple(vector_names)
        self.stride = stride
        flat = np.array(samples, dtype=float).ravel()
        self.buffer_length = flat.size

        row_width = len(self.vector_names) * stride
        if row_width == 0:
            if flat.size:
                raise MalformedBuffer(f"{flat.size} values returned with no vectors declared")
            self.sample_count = 0
        else:
            if flat.size % row_width:
                raise MalformedBuffer(
                    f"Buffer length {flat.size} is not a multiple of "
                    f"{len(self.vector_names)} vectors x stride {stride}"
                )
            self.sample_count = flat.size // row_width

        self._grid = flat.reshape(self.sample_count, len(self.vector_names), stride)
        self._grid.flags.writeable = False

        self._index = {}
        for i, name in enumerate(self.vector_names):
            self._index.setdefault(_lookup_key(name), i)

    @classmethod
    def from_response(cls, response) -> "SampleBuffer":
        """Build a buffer from an EngineResponse."""
        return cls(response.vector_names, response.stride, response.samples)

    @property
    def vector_count(self) -> int:
        return len(self.vector_names)

    @property
    def is_complex(self) -> bool:
        return self.stride == COMPLEX_STRIDE

    def index_of(self, name: str) -> Optional[int]:
        """Index of a vector, ignoring case and surrounding whitespace."""
        return self._index.get(_lookup_key(name))

    def real_at(self, sample: int, vector_index: int) -> float:
        return float(self._grid[self._check(sample, vector_index)][0])

    def imag_at(self, sample: int, vector_index: int) -> float:
        if not self.is_complex:
            raise StrideError("Imaginary component requested from a real-valued run")
        return float(self._grid[self._check(sample, vector_index)][1])

    def real(self, vector_index: int) -> np.ndarray:
        """All real components of one vector, in sample order."""
        return self._grid[:, self._check_vector(vector_index), 0]

    def imag(self, vector_index: int) -> np.ndarray:
        if not self.is_complex:
            raise StrideError("Imaginary component requested from a real-valued run")
        return self._grid[:, self._check_vector(vector_index), 1]

    def describe(self) -> str:
        """Diagnostic summary used in NoData messages."""
        return (
            f"vectors={self.vector_count}, stride={self.stride}, "
            f"buffer length={self.buffer_length}, samples={self.sample_count}"
        )

    def _check(self, sample: int, vector_index: int) -> tuple[int, int]:
        if not 0 <= sample < self.sample_count:
            raise IndexError(f"Sample {sample} out of range (0..{self.sample_count - 1})")
        return sample, self._check_vector(vector_index)

    def _check_vector(self, vector_index: int) -> int:
        # Negative indices would wrap to another vector
        if not 0 <= vector_index < self.vector_count:
            raise IndexError(f"Vector {vector_index} out of range (0..{self.vector_count - 1})")
        return vector_index

    def __repr__(self) -> str:
        return f"SampleBuffer({self.describe()})"
