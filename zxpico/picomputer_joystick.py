"""Joystick driven by the direction keys of the built-in keyboard."""

from __future__ import annotations

from .keyscan import KeyScanner


class PicomputerJoystick:
    """Kempston joystick read from a key matrix scanner."""

    def __init__(self, scanner: KeyScanner) -> None:
        self._scanner = scanner
        self.enabled = True

    def kempston(self) -> int:
        return self._scanner.kempston() if self.enabled else 0

    def sinclair_l(self) -> int:
        return 0xFF

    def sinclair_r(self) -> int:
        return 0xFF

    def is_connected_l(self) -> bool:
        return True

    def is_connected_r(self) -> bool:
        return False

    def joy1(self) -> int:
        return 0