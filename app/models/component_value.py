"""
ComponentValue - user-entered component magnitude plus unit prefix.

Pure Python data model. The magnitude stays as the text
the user typed; it is only parsed when the value is encoded for the engine.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ComponentValue:
    """A magnitude string and the unit prefix selected next to it."""

    magnitude: str
    unit_suffix: str = ""

    @classmethod
    def parse(cls, text: str) -> "ComponentValue":
        """Split text such as '4.7k' or '100meg' into magnitude and suffix.

        Only the trailing alphabetic run is treated as the suffix, so
        exponent notation like '1e-6' stays in the magnitude.
        """
        text = text.strip()
        end = len(text)
        while end > 0 and text[end - 1].isalpha():
            end -= 1
        return cls(text[:end], text[end:])

    def to_dict(self) -> dict:
        return {"magnitude": self.magnitude, "unit_suffix": self.unit_suffix}

    @classmethod
    def from_dict(cls, data: dict) -> "ComponentValue":
        return cls(str(data["magnitude"]), str(data.get("unit_suffix", "")))
