"""
simulation/ngspice_runner.py

Runs analyses through the ngspice shared library (libngspice).

The library reports results through callbacks: SendInitData announces the
vector names of a new run, SendData delivers one row of values per accepted
point. The runner collects these into the flat buffer that SampleBuffer
decodes. Runs are serialized; a second caller waits for the first.
"""

import ctypes.util
import logging
import os
import platform
import threading
from ctypes import CDLL, CFUNCTYPE, POINTER, Structure, c_bool, c_char_p, c_double, c_int, c_short, c_void_p
from dataclasses import dataclass

from .errors import EngineError
from .sample_buffer import COMPLEX_STRIDE, REAL_STRIDE

logger = logging.getLogger(__name__)

ENCODING = "utf-8"
LIBRARY_ENV_VAR = "NGSPICE_LIBRARY"

# Seconds to wait for a background run to report completion
BG_TIMEOUT = 60

_NBSP = "\u00a0"


@dataclass(frozen=True)
class EngineResponse:
    """Everything the engine returns for one run."""

    summary: str
    vector_names: tuple[str, ...]
    stride: int
    samples: tuple[float, ...]


# --- Deck preparation ---


def normalize_line(line: str) -> str:
    """Strip CR and trailing blanks; NBSP (from mobile keyboards) becomes a space."""
    return line.rstrip("\r").replace(_NBSP, " ").rstrip(" \t")


def normalize_deck(netlist: str) -> list[str]:
    """
    Prepare netlist text for ngSpice_Circ.

    Blank lines are dropped and '.end' is appended when no line contains it.
    """
    lines = []
    has_end = False
    for raw in netlist.split("\n"):
        line = normalize_line(raw)
        if not line.strip():
            continue
        if ".end" in line.lower():
            has_end = True
        lines.append(line)
    if not has_end:
        lines.append(".end")
    return lines


def analysis_requires_complex(command: str) -> bool:
    """AC analyses produce complex vectors; op and tran are real-valued."""
    return command.strip().lower().startswith("ac")


def stride_for(command: str) -> int:
    return COMPLEX_STRIDE if analysis_requires_complex(command) else REAL_STRIDE


# --- ctypes mirrors of sharedspice.h ---


class VecValues(Structure):
    _fields_ = [
        ("name", c_char_p),
        ("creal", c_double),
        ("cimag", c_double),
        ("is_scale", c_bool),
        ("is_complex", c_bool),
    ]


class VecValuesAll(Structure):
    _fields_ = [
        ("veccount", c_int),
        ("vecindex", c_int),
        ("vecsa", POINTER(POINTER(VecValues))),
    ]


class VecInfo(Structure):
    _fields_ = [
        ("number", c_int),
        ("vecname", c_char_p),
        ("is_real", c_bool),
        ("pdvec", c_void_p),
        ("pdvecscale", c_void_p),
    ]


class VecInfoAll(Structure):
    _fields_ = [
        ("name", c_char_p),
        ("title", c_char_p),
        ("date", c_char_p),
        ("type", c_char_p),
        ("veccount", c_int),
        ("vecs", POINTER(POINTER(VecInfo))),
    ]


SendCharFunc = CFUNCTYPE(c_int, c_char_p, c_int, c_void_p)
SendStatFunc = CFUNCTYPE(c_int, c_char_p, c_int, c_void_p)
ControlledExitFunc = CFUNCTYPE(c_int, c_int, c_bool, c_bool, c_int, c_void_p)
SendDataFunc = CFUNCTYPE(c_int, POINTER(VecValuesAll), c_int, c_int, c_void_p)
SendInitDataFunc = CFUNCTYPE(c_int, POINTER(VecInfoAll), c_int, c_void_p)
BGThreadRunningFunc = CFUNCTYPE(c_int, c_bool, c_int, c_void_p)


def _library_candidates():
    system = platform.system()
    if system == "Windows":
        return [
            r"C:\Program Files\Spice64\bin_dll\ngspice.dll",
            r"C:\Program Files\Spice\bin_dll\ngspice.dll",
            "ngspice.dll",
        ]
    if system == "Darwin":  # macOS
        return [
            "/opt/homebrew/lib/libngspice.dylib",
            "/usr/local/lib/libngspice.dylib",
        ]
    return [
        "/usr/lib/libngspice.so",
        "/usr/local/lib/libngspice.so",
        "/usr/lib/x86_64-linux-gnu/libngspice.so.0",
    ]


class NgspiceRunner:
    """Engine adapter over libngspice."""

    def __init__(self, library_path=None):
        self.library_path = library_path
        self._lib = None
        self._callbacks = ()
        self._run_lock = threading.Lock()
        self._data_lock = threading.Lock()
        self._bg_idle = threading.Event()
        self._bg_idle.set()
        self._output: list[str] = []
        self._vector_names: list[str] = []
        self._samples: list[float] = []
        self._store_complex = False
        self._has_loaded_circuit = False

    def find_ngspice(self):
        """Find the ngspice shared library on the system"""
        if self.library_path:
            return self.library_path

        env_path = os.environ.get(LIBRARY_ENV_VAR)
        if env_path and os.path.exists(env_path):
            self.library_path = env_path
            return env_path

        found = ctypes.util.find_library("ngspice")
        if found:
            self.library_path = found
            return found

        for path in _library_candidates():
            if os.path.exists(path):
                self.library_path = path
                return path

        return None

    def initialize(self) -> None:
        """Load libngspice and register callbacks (once)."""
        if self._lib is not None:
            return

        path = self.find_ngspice()
        if path is None:
            raise EngineError(f"ngspice shared library not found. Install ngspice or set {LIBRARY_ENV_VAR}.")

        try:
            lib = CDLL(path)
        except OSError as e:
            raise EngineError(f"Failed to load ngspice library {path}: {e}") from e

        # Keep references: ctypes callbacks die with their Python objects
        self._callbacks = (
            SendCharFunc(self._send_char),
            SendStatFunc(self._send_char),
            ControlledExitFunc(self._controlled_exit),
            SendDataFunc(self._send_data),
            SendInitDataFunc(self._send_init_data),
            BGThreadRunningFunc(self._bg_thread_running),
        )
        lib.ngSpice_Command.argtypes = [c_char_p]
        lib.ngSpice_Circ.argtypes = [POINTER(c_char_p)]

        ret = lib.ngSpice_Init(*self._callbacks, None)
        if ret != 0:
            raise EngineError(f"ngSpice_Init failed, ret={ret}")

        self._lib = lib
        self._has_loaded_circuit = False
        logger.info("ngspice initialized from %s", path)

    def run(self, netlist: str, command: str) -> EngineResponse:
        """
        Load *netlist* and run *command* (e.g. 'op', 'tran 0.1u 100u').

        Raises:
            EngineError: if the library is unavailable or the deck fails to load.
        """
        with self._run_lock:
            self.initialize()
            self._output.clear()

            # 'destroy'/'reset' complain if no circuit was ever loaded
            if self._has_loaded_circuit:
                self._command("destroy all")
                self._command("reset")
                self._output.clear()

            stride = stride_for(command)
            self._store_complex = stride == COMPLEX_STRIDE

            deck = normalize_deck(netlist)
            if self._load_deck(deck) != 0:
                raise EngineError("Failed to load netlist:\n" + self._summary())
            self._has_loaded_circuit = True

            logger.debug("Running analysis: %s", command)
            self._bg_idle.set()
            self._command(command)
            if not self._bg_idle.wait(BG_TIMEOUT):
                raise EngineError(f"Analysis did not finish within {BG_TIMEOUT} seconds")

            with self._data_lock:
                names, self._vector_names = tuple(self._vector_names), []
                samples, self._samples = tuple(self._samples), []

            return EngineResponse(summary=self._summary(), vector_names=names, stride=stride, samples=samples)

    # --- library calls ---

    def _command(self, command: str) -> int:
        return self._lib.ngSpice_Command(command.encode(ENCODING))

    def _load_deck(self, lines: list[str]) -> int:
        deck = (c_char_p * (len(lines) + 1))()
        for i, line in enumerate(lines):
            deck[i] = (line + "\n").encode(ENCODING)
        deck[len(lines)] = None
        return self._lib.ngSpice_Circ(deck)

    def _summary(self) -> str:
        return "\n".join(self._output)

    # --- callbacks ---

    def _send_char(self, message, lib_id, user_data):
        if message:
            self._output.append(message.decode(ENCODING, errors="replace"))
        return 0

    def _controlled_exit(self, status, unloading, quit_upon_exit, lib_id, user_data):
        self._output.append(f"[ngspice exited with status {status}]")
        self._lib = None
        return 0

    def _send_init_data(self, info, lib_id, user_data):
        info = info.contents
        with self._data_lock:
            self._samples = []
            self._vector_names = [
                info.vecs[i].contents.vecname.decode(ENCODING, errors="replace") for i in range(info.veccount)
            ]
        return 0

    def _send_data(self, values, count, lib_id, user_data):
        values = values.contents
        with self._data_lock:
            for i in range(values.veccount):
                vec = values.vecsa[i].contents
                self._samples.append(vec.creal)
                if self._store_complex:
                    self._samples.append(vec.cimag)
        return 0

    def _bg_thread_running(self, no_runs, lib_id, user_data):
        # sharedspice.h: the flag is true when the background thread is NOT running
        if no_runs:
            self._bg_idle.set()
        else:
            self._bg_idle.clear()
        return 0
