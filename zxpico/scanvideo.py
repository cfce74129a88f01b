"""Composable scanvideo scanline generation for the Spectrum display."""

from __future__ import annotations

import enum
from collections.abc import Sequence
from dataclasses import dataclass
from functools import lru_cache

_MASK32 = 0xFFFFFFFF

SCREEN_TOP = 24
SCREEN_LINES = 192
CHARS_PER_LINE = 32


class Composable(enum.IntEnum):
    """Tokens understood by the composable scanline PIO program."""

    COLOR_RUN = 0
    EOL_ALIGN = 1
    EOL_SKIP_ALIGN = 2
    RAW_RUN = 3
    RAW_1P = 4
    RAW_2P = 5
    RAW_1P_SKIP_ALIGN = 6


class ColourEncoding(enum.Enum):
    """How a pixel colour is laid out on the video output pins."""

    BGYR_1111 = "bgyr_1111"
    RGBY_1111 = "rgby_1111"
    RGB_222 = "rgb_222"
    RGB_332 = "rgb_332"
    RGB_555 = "rgb_555"


@dataclass(frozen=True)
class BorderLayout:
    """Widths, in Spectrum pixels, of the border parts of a display line."""

    border_pixels: int
    left_coloured: int
    right_coloured: int
    left_blank: int = 0
    right_blank: int = 0


def _pixel_value(encoding: ColourEncoding, index: int) -> int:
    blue = bool(index & 1)
    red = bool(index & 2)
    green = bool(index & 4)
    bright = bool(index & 8)

    if encoding in (ColourEncoding.BGYR_1111, ColourEncoding.RGBY_1111):
        y = int(bright and (red or green or blue))
        r, g, b = int(red), int(green), int(blue)
        if encoding is ColourEncoding.BGYR_1111:
            return (y << 2) | (r << 3) | (g << 1) | b
        return (y << 3) | (r << 2) | (g << 1) | b

    if encoding is ColourEncoding.RGB_222:
        level = 3 if bright else 2
        r, g, b = (level if on else 0 for on in (red, green, blue))
        return (r << 4) | (g << 2) | b

    if encoding is ColourEncoding.RGB_332:
        rg_level = 7 if bright else 5
        b_level = 3 if bright else 2
        r = rg_level if red else 0
        g = rg_level if green else 0
        b = b_level if blue else 0
        return (r << 5) | (g << 2) | b

    level = 31 if bright else 20
    r, g, b = (level if on else 0 for on in (red, green, blue))
    return r | (g << 6) | (b << 11)


@lru_cache(maxsize=None)
def colour_words(encoding: ColourEncoding) -> tuple[int, ...]:
    """The 16 Spectrum colours as two-pixel words for the given encoding."""
    words = []
    for index in range(16):
        value = _pixel_value(encoding, index)
        words.append((value | (value << 16)) & _MASK32)
    return tuple(words)


def _colour_run(width: int, colour_word: int) -> list[int]:
    return [
        (Composable.COLOR_RUN | (colour_word << 16)) & _MASK32,
        ((width - 3 - 2) & _MASK32) | (Composable.RAW_2P << 16),
        colour_word,
    ]


def _end_run() -> list[int]:
    return [int(Composable.RAW_1P), int(Composable.EOL_SKIP_ALIGN)]


def prepare_scanline(
    y: int,
    frame: int,
    screen: Sequence[int],
    attrs: Sequence[int],
    border_colour: int,
    encoding: ColourEncoding,
    layout: BorderLayout,
) -> list[int]:
    """Build the composable words for display line ``y``."""
    palette = colour_words(encoding)
    border_word = palette[border_colour]
    words: list[int] = []

    if layout.left_blank:
        words += _colour_run(layout.left_blank << 1, palette[0])

    if y < SCREEN_TOP or y >= SCREEN_TOP + SCREEN_LINES:
        coloured = layout.border_pixels - layout.left_blank - layout.right_blank
        words += _colour_run(coloured << 1, border_word)
    else:
        words += _colour_run(layout.left_coloured << 1, border_word)

        v = y - SCREEN_TOP
        s = ((v & 0x7) << 8) + ((v & 0x38) << 2) + ((v & 0xC0) << 5)
        a = (v >> 3) << 5
        pixel_row = screen[s:s + CHARS_PER_LINE]
        attr_row = attrs[a:a + CHARS_PER_LINE]
        if len(pixel_row) != CHARS_PER_LINE or len(attr_row) != CHARS_PER_LINE:
            raise ValueError("screen or attribute memory too short for line %d" % y)
        flash = (frame >> 5) & 1

        for pixels, attr in zip(pixel_row, attr_row):
            if (attr >> 7) & flash:
                pixels ^= 0xFF
            background = (attr >> 3) & 0xF
            foreground = (attr & 7) | (background & 0x8)
            cw = (palette[background], palette[foreground])
            first = cw[(pixels >> 7) & 1]
            words.append((Composable.RAW_RUN | (first << 16)) & _MASK32)
            words.append(((16 - 3) | (first << 16)) & _MASK32)
            words.extend(cw[(pixels >> shift) & 1] for shift in range(6, -1, -1))

        words += _colour_run(layout.right_coloured << 1, border_word)

    if layout.right_blank:
        words += _colour_run(layout.right_blank << 1, palette[0])

    words += _end_run()
    return words


def prepare_blankline(width: int, encoding: ColourEncoding) -> list[int]:
    """Build the composable words for a black line ``width`` pixels wide."""
    return _colour_run(width, colour_words(encoding)[0]) + _end_run()