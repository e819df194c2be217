"""
simulation/unit_encoder.py

Turns a user-entered magnitude and unit prefix into an ngspice literal.

ngspice reads scale factors case-insensitively, so 'M' and 'm' both mean
milli. Mega has to be written as 'meg'; getting this wrong produces a value
off by a factor of 1e9 without any error from the engine.
"""

import logging
import math
from typing import Mapping

from models.component_value import ComponentValue

from .errors import InvalidMagnitude, InvalidUnitSuffix

logger = logging.getLogger(__name__)

MEGA_TOKEN = "meg"

# Accepted suffix -> engine token. Everything but mega passes through as-is.
UNIT_SUFFIXES = {
    "": "",
    "f": "f",  # Femto
    "F": "F",
    "p": "p",  # Pico
    "P": "P",
    "n": "n",  # Nano
    "N": "N",
    "u": "u",  # Micro
    "U": "U",
    "m": "m",  # Milli
    "k": "k",  # Kilo
    "K": "K",
    "M": MEGA_TOKEN,  # Mega, not milli
    "G": "G",  # Giga
    "g": "g",
    "T": "T",  # Tera
    "t": "t",
}

# Prefixes offered to the user, smallest first
DISPLAY_SUFFIXES = ["f", "p", "n", "u", "m", "", "k", "M", "G", "T"]


def encode_suffix(unit_suffix: str, name: str = "") -> str:
    """Map a unit suffix to the token ngspice expects."""
    suffix = unit_suffix.strip()
    if suffix.lower() == MEGA_TOKEN:
        return MEGA_TOKEN
    try:
        return UNIT_SUFFIXES[suffix]
    except KeyError:
        raise InvalidUnitSuffix(unit_suffix, name) from None


def encode(magnitude_text: str, unit_suffix: str = "", name: str = "") -> str:
    """
    Encode a magnitude and unit suffix as an ngspice literal.

    Magnitudes are validated locally: text that does not parse as a finite
    real number raises InvalidMagnitude instead of being passed on to the
    engine. The user's text is kept as typed (stripped), so '4.7' stays
    '4.7' rather than becoming '4.7000'.

    Examples: ('4.7', 'k') -> '4.7k', ('100', 'M') -> '100meg'
    """
    if not isinstance(magnitude_text, str):
        raise InvalidMagnitude(repr(magnitude_text), name)

    text = magnitude_text.strip()
    try:
        value = float(text)
    except ValueError:
        raise InvalidMagnitude(magnitude_text, name) from None
    if not math.isfinite(value):
        raise InvalidMagnitude(magnitude_text, name)

    return text + encode_suffix(unit_suffix, name)


def encode_value(value: ComponentValue, name: str = "") -> str:
    """Encode a ComponentValue."""
    return encode(value.magnitude, value.unit_suffix, name)


def encode_values(values: Mapping[str, ComponentValue]) -> dict[str, str]:
    """Encode a full parameter set, keyed by placeholder name."""
    encoded = {}
    for name, value in values.items():
        if isinstance(value, str):
            value = ComponentValue.parse(value)
        encoded[name] = encode_value(value, name)
        logger.debug("Encoded %s = %s", name, encoded[name])
    return encoded
