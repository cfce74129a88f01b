"""ZX Spectrum display encoding, key matrix scanning and settings."""

__version__ = "0.1.0"
__all__ = ["keyscan", "picomputer_joystick", "rgb444", "scanvideo", "settings", "st7789"]