"""ST7789 LCD initialisation command sequence."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

DELAY_UNIT_MS = 5

SWRESET = 0x01
SLPOUT = 0x11
NORON = 0x13
INVON = 0x21
DISPON = 0x29
CASET = 0x2A
RASET = 0x2B
RAMWR = 0x2C
MADCTL = 0x36
COLMOD = 0x3A

MADCTL_NORMAL = 0x30
MADCTL_MIRROR_X = 0x70


@dataclass(frozen=True)
class LcdCommand:
    """One controller command with its parameters and the pause after it."""

    command: int
    params: bytes = b""
    delay_ms: int = 0


def init_sequence(mirror_x: bool = False) -> list[LcdCommand]:
    """The commands that bring the panel up in 12-bit colour mode."""
    madctl = MADCTL_MIRROR_X if mirror_x else MADCTL_NORMAL
    steps = [
        (SWRESET, b"", 20),
        (SLPOUT, b"", 10),
        (COLMOD, bytes([0x63]), 2),
        (MADCTL, bytes([madctl]), 0),
        (CASET, bytes([0x00, 0x00, 0x01, 0x40]), 0),
        (RASET, bytes([0x00, 0x00, 0x00, 0xF0]), 0),
        (INVON, b"", 2),
        (NORON, b"", 2),
        (DISPON, b"", 2),
    ]
    return [LcdCommand(cmd, params, units * DELAY_UNIT_MS) for cmd, params, units in steps]


def parse_init_sequence(data: bytes) -> list[LcdCommand]:
    """Decode a zero-terminated table of length, delay, command and payload."""
    commands = []
    pos = 0
    while True:
        if pos >= len(data):
            raise ValueError("init sequence has no terminator")
        length = data[pos]
        if length == 0:
            return commands
        end = pos + 2 + length
        if end > len(data):
            raise ValueError("init sequence truncated at offset %d" % pos)
        delay_units = data[pos + 1]
        commands.append(
            LcdCommand(
                command=data[pos + 2],
                params=bytes(data[pos + 3:end]),
                delay_ms=delay_units * DELAY_UNIT_MS,
            )
        )
        pos = end


def encode_init_sequence(commands: Iterable[LcdCommand]) -> bytes:
    """Encode commands into the zero-terminated table form."""
    out = bytearray()
    for cmd in commands:
        if not 0 <= cmd.command <= 0xFF:
            raise ValueError("command byte out of range: %r" % cmd.command)
        length = len(cmd.params) + 1
        if length > 0xFF:
            raise ValueError("too many parameters for command 0x%02x" % cmd.command)
        units, rest = divmod(cmd.delay_ms, DELAY_UNIT_MS)
        if rest or not 0 <= units <= 0xFF:
            raise ValueError("delay %r ms cannot be encoded" % cmd.delay_ms)
        out += bytes([length, units, cmd.command])
        out += cmd.params
    out.append(0)
    return bytes(out)