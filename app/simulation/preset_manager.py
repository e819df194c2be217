"""Analysis preset manager - named pairs of an analysis command and component values."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

from models.analysis_result import AnalysisKind
from models.component_value import ComponentValue

from .errors import UnsupportedAnalysis

logger = logging.getLogger(__name__)

# Component values for the default RLC template
DEFAULT_COMPONENT_VALUES = MappingProxyType(
    {
        "VS": ComponentValue("5"),
        "R1": ComponentValue("1", "k"),
        "R2": ComponentValue("1", "k"),
        "R3": ComponentValue("1", "k"),
        "C1": ComponentValue("100", "n"),
        "L1": ComponentValue("10", "m"),
    }
)


@dataclass(frozen=True)
class AnalysisPreset:
    """An engine command and the component values it runs with.

    ``values`` is copied into a read-only mapping, so presets never share
    state with each other or with the mapping they were built from.
    """

    name: str
    command: str
    values: Mapping[str, ComponentValue] = field(default_factory=dict)
    builtin: bool = False

    def __post_init__(self):
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    @property
    def kind(self) -> AnalysisKind:
        return AnalysisKind.from_command(self.command)

    def matches(self, name: str) -> bool:
        return self.name.casefold() == name.strip().casefold()

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "command": self.command,
            "values": {k: v.to_dict() for k, v in self.values.items()},
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AnalysisPreset":
        AnalysisKind.from_command(data["command"])
        values = {k: ComponentValue.from_dict(v) for k, v in data.get("values", {}).items()}
        return cls(name=data["name"], command=data["command"], values=values)


BUILTIN_PRESETS = [
    AnalysisPreset("Operating Point", "op", DEFAULT_COMPONENT_VALUES, builtin=True),
    AnalysisPreset("Quick Transient", "tran 0.1u 100u", DEFAULT_COMPONENT_VALUES, builtin=True),
    AnalysisPreset("Wide AC Sweep", "ac dec 20 0.1 100meg", DEFAULT_COMPONENT_VALUES, builtin=True),
]


class PresetManager:
    """Built-in presets plus user presets kept in a JSON file.

    Names are unique case-insensitively. Built-in presets can be neither
    replaced nor deleted. Entries this version cannot read (for example an
    analysis it does not support) are skipped on load but written back
    unchanged, so they survive a save.
    """

    def __init__(self, preset_file: Optional[Path] = None):
        self._preset_file = Path(preset_file) if preset_file else Path.home() / ".droidspice" / "analysis_presets.json"
        self._user_presets: list[AnalysisPreset] = []
        self._skipped_entries: list = []
        self._unreadable = False
        self._load()

    @property
    def preset_file(self) -> Path:
        return self._preset_file

    def get_presets(self, kind: Optional[AnalysisKind] = None) -> list[AnalysisPreset]:
        """Built-in presets first, then user presets; optionally only one kind."""
        presets = BUILTIN_PRESETS + self._user_presets
        if kind is None:
            return presets
        return [p for p in presets if p.kind is kind]

    def get_preset_by_name(self, name: str) -> Optional[AnalysisPreset]:
        return next((p for p in self.get_presets() if p.matches(name)), None)

    def save_preset(self, name: str, command: str, values: Mapping[str, ComponentValue]) -> AnalysisPreset:
        """Add or replace a user preset.

        Raises:
            UnsupportedAnalysis: if *command* is not op, tran or ac.
            ValueError: if *name* is empty or belongs to a built-in preset.
        """
        AnalysisKind.from_command(command)
        if not name.strip():
            raise ValueError("Preset name must not be empty")
        if any(bp.matches(name) for bp in BUILTIN_PRESETS):
            raise ValueError(f"Cannot overwrite built-in preset '{name}'")

        preset = AnalysisPreset(name.strip(), command.strip(), dict(values))
        self._user_presets = [p for p in self._user_presets if not p.matches(name)] + [preset]
        # A readable preset replaces an unreadable one of the same name
        self._skipped_entries = [
            e
            for e in self._skipped_entries
            if not (isinstance(e, dict) and preset.matches(str(e.get("name", ""))))
        ]
        self._store()
        logger.info("Saved preset '%s' (%s)", preset.name, preset.command)
        return preset

    def delete_preset(self, name: str) -> bool:
        """Remove a user preset. Built-in and unknown names return False."""
        remaining = [p for p in self._user_presets if not p.matches(name)]
        if len(remaining) == len(self._user_presets):
            return False
        self._user_presets = remaining
        self._store()
        return True

    def _load(self) -> None:
        if not self._preset_file.exists():
            return
        try:
            entries = json.loads(self._preset_file.read_text(encoding="utf-8"))["presets"]
            if not isinstance(entries, list):
                raise TypeError("'presets' is not a list")
        except (json.JSONDecodeError, OSError, UnicodeDecodeError, KeyError, TypeError) as e:
            logger.warning("Ignoring unreadable preset file %s: %s", self._preset_file, e)
            self._unreadable = True
            return

        for entry in entries:
            try:
                self._user_presets.append(AnalysisPreset.from_dict(entry))
            except (KeyError, TypeError, AttributeError, UnsupportedAnalysis) as e:
                logger.warning("Skipping preset entry %r in %s: %s", entry, self._preset_file, e)
                self._skipped_entries.append(entry)

    def _store(self) -> None:
        try:
            self._preset_file.parent.mkdir(parents=True, exist_ok=True)
            if self._unreadable and self._preset_file.exists():
                backup = self._preset_file.with_name(self._preset_file.name + ".bak")
                self._preset_file.replace(backup)
                logger.warning("Moved unreadable preset file to %s", backup)
                self._unreadable = False
            payload = {"presets": [p.to_dict() for p in self._user_presets] + self._skipped_entries}
            self._preset_file.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as e:
            logger.error("Could not write presets to %s: %s", self._preset_file, e)
