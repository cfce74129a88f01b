"""Emulator settings with defaults, sanitising and overridable storage."""

from __future__ import annotations

import enum
from collections.abc import MutableMapping
from dataclasses import asdict, dataclass, fields, replace

MAX_VOLUME = 0x100


class JoystickMode(enum.IntEnum):
    KEMPSTON = 0
    SINCLAIR_LR = 1
    SINCLAIR_RL = 2


class MouseMode(enum.IntEnum):
    KEMPSTON_MOUSE = 0
    JOYSTICK = 1


@dataclass
class SettingValues:
    volume: int = MAX_VOLUME
    joystick_mode: JoystickMode = JoystickMode.KEMPSTON
    mouse_mode: MouseMode = MouseMode.KEMPSTON_MOUSE
    mouse_joystick_mode: JoystickMode = JoystickMode.KEMPSTON


def _coerce(enum_type, value, fallback):
    try:
        return enum_type(value)
    except ValueError:
        return fallback


class Settings:
    """Settings store; without a backing mapping nothing is persisted.

    Subclasses may override ``on_save`` and ``on_load`` to persist values
    elsewhere, such as a file.
    """

    def __init__(self, store: MutableMapping[str, int] | None = None) -> None:
        self._store = store

    def defaults(self) -> SettingValues:
        return SettingValues()

    def sanitise(self, values: SettingValues) -> SettingValues:
        """Return a copy with out-of-range values replaced by safe ones."""
        return replace(
            values,
            volume=min(values.volume, MAX_VOLUME),
            joystick_mode=_coerce(JoystickMode, values.joystick_mode, JoystickMode.KEMPSTON),
            mouse_mode=_coerce(MouseMode, values.mouse_mode, MouseMode.KEMPSTON_MOUSE),
            mouse_joystick_mode=_coerce(
                JoystickMode, values.mouse_joystick_mode, JoystickMode.KEMPSTON
            ),
        )

    def on_save(self, values: SettingValues) -> bool:
        """Persist values in the backing mapping; return True when they were stored."""
        if self._store is None:
            return False
        self._store.update({name: int(value) for name, value in asdict(values).items()})
        return True

    def on_load(self, values: SettingValues) -> SettingValues | None:
        """Return stored values layered over ``values``, or None if none exist."""
        if not self._store:
            return None
        known = {f.name for f in fields(SettingValues)}
        stored = {name: value for name, value in self._store.items() if name in known}
        if not stored:
            return None
        return replace(values, **stored)

    def save(self, values: SettingValues) -> bool:
        return self.on_save(self.sanitise(values))

    def load(self) -> tuple[SettingValues, bool]:
        """Load settings; returns the sanitised values and whether any were stored."""
        loaded = self.on_load(self.defaults())
        if loaded is None:
            return self.sanitise(self.defaults()), False
        return self.sanitise(loaded), True