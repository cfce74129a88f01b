"""RGB444 pixel words for the ST7789 LCD, two pixels packed per word."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from functools import lru_cache

_MASK32 = 0xFFFFFFFF

SCREEN_TOP = 24
SCREEN_LINES = 192
FRAME_LINES = 240
LINE_WORDS = 160
EDGE_WORDS = 16

_BITBIT_MASKS = (0x00000000, 0x000FFF00, 0xFFF00000, 0xFFFFFF00)


@lru_cache(maxsize=None)
def colour_words(inverse: bool = False, rgb_order: bool = False) -> tuple[int, ...]:
    """The 16 Spectrum colours as words holding two RGB444 pixels."""
    words = []
    for index in range(16):
        level = 0xF if index & 8 else 0xC
        r = level if index & 2 else 0
        g = level if index & 4 else 0
        b = level if index & 1 else 0
        if inverse:
            r, g, b = 0xF - r, 0xF - g, 0xF - b
        if rgb_order:
            value = (b << 8) | (g << 4) | r
        else:
            value = (r << 8) | (g << 4) | b
        words.append(((value << 20) | (value << 8)) & _MASK32)
    return tuple(words)


def scanline_words(
    y: int,
    frame: int,
    screen: Sequence[int],
    attrs: Sequence[int],
    border_colour: int,
    palette: Sequence[int] | None = None,
) -> list[int]:
    """The 160 words sent to the LCD for display line ``y``."""
    if palette is None:
        palette = colour_words()
    border_word = palette[border_colour]

    if y < SCREEN_TOP or y >= SCREEN_TOP + SCREEN_LINES:
        return [border_word] * LINE_WORDS

    v = y - SCREEN_TOP
    s = ((v & 0x7) << 8) + ((v & 0x38) << 2) + ((v & 0xC0) << 5)
    a = (v >> 3) << 5
    pixel_row = screen[s:s + 32]
    attr_row = attrs[a:a + 32]
    if len(pixel_row) != 32 or len(attr_row) != 32:
        raise ValueError("screen or attribute memory too short for line %d" % y)
    flash = (frame >> 5) & 1

    words = [border_word] * EDGE_WORDS
    for pixels, attr in zip(pixel_row, attr_row):
        if (attr >> 7) & flash:
            pixels ^= 0xFF
        background = (attr >> 3) & 0xF
        foreground = (attr & 7) | (background & 0x8)
        bcw = palette[background]
        fcw = palette[foreground]
        for shift in (6, 4, 2, 0):
            fgm = _BITBIT_MASKS[(pixels >> shift) & 3]
            bgm = ~fgm & _MASK32
            words.append((fgm & fcw) | (bgm & bcw))
    words.extend([border_word] * EDGE_WORDS)
    return words


def frame_words(
    frame: int,
    screen: Sequence[int],
    attrs: Sequence[int],
    border_colour: int,
    palette: Sequence[int] | None = None,
) -> Iterator[int]:
    """Every word of a whole 240-line frame, top line first."""
    for y in range(FRAME_LINES):
        yield from scanline_words(y, frame, screen, attrs, border_colour, palette)