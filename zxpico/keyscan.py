"""Key matrix scanning for Picomputer and PicoZX keyboards.

The scanner drives one matrix row at a time, oversamples the column lines,
debounces them and turns the result into HID boot keyboard reports and a
Kempston joystick byte.
"""

from __future__ import annotations

import enum
import time
from collections.abc import Callable
from dataclasses import dataclass, field

SAMPLES = 4
REPORT_KEYS = 6

MODIFIER_LEFT_CTRL = 0x01
MODIFIER_LEFT_SHIFT = 0x02

# Kempston joystick bits: 000FUDLR
KEMPSTON_FIRE = 0x10
KEMPSTON_UP = 0x08
KEMPSTON_DOWN = 0x04
KEMPSTON_LEFT = 0x02
KEMPSTON_RIGHT = 0x01

_KEMPSTON_BITS = {
    "fire": KEMPSTON_FIRE,
    "up": KEMPSTON_UP,
    "down": KEMPSTON_DOWN,
    "left": KEMPSTON_LEFT,
    "right": KEMPSTON_RIGHT,
}


class HidKey(enum.IntEnum):
    """USB HID keyboard usage codes used by the key maps."""

    NONE = 0x00
    ERROR_ROLLOVER = 0x01
    A = 0x04
    B = 0x05
    C = 0x06
    D = 0x07
    E = 0x08
    F = 0x09
    G = 0x0A
    H = 0x0B
    I = 0x0C  # noqa: E741
    J = 0x0D
    K = 0x0E
    L = 0x0F
    M = 0x10
    N = 0x11
    O = 0x12  # noqa: E741
    P = 0x13
    Q = 0x14
    R = 0x15
    S = 0x16
    T = 0x17
    U = 0x18
    V = 0x19
    W = 0x1A
    X = 0x1B
    Y = 0x1C
    Z = 0x1D
    N1 = 0x1E
    N2 = 0x1F
    N3 = 0x20
    N4 = 0x21
    N5 = 0x22
    N6 = 0x23
    N7 = 0x24
    N8 = 0x25
    N9 = 0x26
    N0 = 0x27
    ENTER = 0x28
    ESCAPE = 0x29
    BACKSPACE = 0x2A
    SPACE = 0x2C
    MINUS = 0x2D
    EQUAL = 0x2E
    BRACKET_LEFT = 0x2F
    BRACKET_RIGHT = 0x30
    BACKSLASH = 0x31
    SEMICOLON = 0x33
    APOSTROPHE = 0x34
    GRAVE = 0x35
    COMMA = 0x36
    PERIOD = 0x37
    SLASH = 0x38
    F1 = 0x3A
    F2 = 0x3B
    F3 = 0x3C
    F4 = 0x3D
    F5 = 0x3E
    F6 = 0x3F
    F7 = 0x40
    F8 = 0x41
    F9 = 0x42
    F10 = 0x43
    F11 = 0x44
    F12 = 0x45
    PAGE_UP = 0x4B
    DELETE = 0x4C
    PAGE_DOWN = 0x4E
    ARROW_RIGHT = 0x4F
    ARROW_LEFT = 0x50
    ARROW_DOWN = 0x51
    ARROW_UP = 0x52
    F13 = 0x68
    F14 = 0x69
    SHIFT_LEFT = 0xE1
    ALT_RIGHT = 0xE6


K = HidKey
_Keymap = tuple[tuple[tuple[int, ...], ...], ...]


def _table(*rows: list) -> tuple[tuple[int, ...], ...]:
    return tuple(tuple(int(k) for k in row) for row in rows)


# --- Picomputer MAX / ZX / VGA: 6 rows x 6 columns ---------------------------

_MAX_ALPHA_LAST = [
    [K.SPACE, K.ALT_RIGHT, K.M, K.N, K.B],
    [K.ENTER, K.L, K.K, K.J, K.H],
    [K.P, K.O, K.I, K.U, K.Y],
    [K.BACKSPACE, K.Z, K.X, K.C, K.V],
    [K.A, K.S, K.D, K.F, K.G],
    [K.Q, K.W, K.E, K.R, K.T],
]
_MAX_NUMERIC = [
    [K.SPACE, K.ALT_RIGHT, K.SEMICOLON, K.MINUS, K.EQUAL],
    [K.ENTER, K.BRACKET_RIGHT, K.BRACKET_LEFT, K.GRAVE, K.BACKSLASH],
    [K.N0, K.N9, K.N8, K.N7, K.N6],
    [K.BACKSPACE, K.COMMA, K.PERIOD, K.SLASH, K.APOSTROPHE],
    [K.A, K.S, K.D, K.F, K.G],
    [K.N1, K.N2, K.N3, K.N4, K.N5],
]
_MAX_ARROWS = [K.ARROW_DOWN, K.ARROW_LEFT, K.ARROW_UP, K.ARROW_RIGHT, K.ESCAPE, 0]
_MAX_NO_ARROWS = [0, 0, 0, 0, K.ESCAPE, 0]

_MAX_KEYMAP: _Keymap = (
    _table(*(row + [last] for row, last in zip(_MAX_ALPHA_LAST, _MAX_ARROWS))),
    _table(*(row + [last] for row, last in zip(_MAX_ALPHA_LAST, _MAX_NO_ARROWS))),
    _table(*(row + [last] for row, last in zip(_MAX_NUMERIC, _MAX_NO_ARROWS))),
    _table(*(row + [last] for row, last in zip(_MAX_NUMERIC, _MAX_ARROWS))),
    _table(
        [0, 0, 0, K.F12, K.F11, 0],
        [K.F10, K.F9, K.F8, K.F7, K.F6, 0],
        [K.F5, K.F4, K.F3, K.F2, K.F1, 0],
        [0, 0, 0, 0, 0, 0],
        [K.F8, K.F9, K.F10, 0, 0, 0],
        [K.F1, K.F2, K.F3, K.F4, 0, 0],
    ),
)

# --- PicoZX built-in keyboard: 7 rows x 7 columns ----------------------------

_PZX_MIDDLE = [
    [K.N1, K.N2, K.N3, K.N4, K.N5, K.N6, K.N7],
    [K.N8, K.N9, K.N0, K.Q, K.W, K.E, K.R],
    [K.T, K.Y, K.U, K.I, K.O, K.P, K.A],
    [K.S, K.D, K.F, K.G, K.H, K.J, K.K],
    [K.L, K.ENTER, K.Z, K.X, K.C, K.V, K.B],
]
_PZX_TOP = [K.ENTER, K.ARROW_LEFT, K.ARROW_UP, K.ARROW_RIGHT, K.ARROW_DOWN, 0, K.ALT_RIGHT]
_PZX_TOP_SHIFT = [K.ESCAPE, K.ARROW_LEFT, K.ARROW_UP, K.ARROW_RIGHT, K.ARROW_DOWN, 0, K.ALT_RIGHT]
_PZX_TOP_JOY = [0, 0, 0, 0, 0, 0, K.ALT_RIGHT]
_PZX_BOTTOM = [K.N, K.M, K.SPACE, K.F1, K.F8, K.F9, K.F10]
_PZX_BOTTOM_SHIFT = [K.N, K.M, K.SPACE, K.F13, K.F14, 0, 0]

_PZX_KEYMAP: _Keymap = (
    _table(_PZX_TOP, *_PZX_MIDDLE, _PZX_BOTTOM),
    _table(_PZX_TOP_SHIFT, *_PZX_MIDDLE, _PZX_BOTTOM_SHIFT),
    _table(_PZX_TOP_JOY, *_PZX_MIDDLE, _PZX_BOTTOM),
    _table(_PZX_TOP_JOY, *_PZX_MIDDLE, _PZX_BOTTOM_SHIFT),
    _table(_PZX_TOP, *_PZX_MIDDLE,
           [K.N, K.M, K.SPACE, K.F1, K.BACKSPACE, K.PAGE_UP, K.PAGE_DOWN]),
    _table(_PZX_TOP_SHIFT, *_PZX_MIDDLE, [K.N, K.M, K.SPACE, 0, K.DELETE, 0, 0]),
)

# --- Real ZX Spectrum keyboard on a PicoZX: 6 rows x 8 columns ---------------

_REAL_R1 = [K.B, K.H, K.V, K.Y, K.N6, K.G, K.T, K.N5]
_REAL_R2 = [K.N, K.J, K.C, K.U, K.N7, K.F, K.R, K.N4]
_REAL_R3 = [K.M, K.K, K.X, K.I, K.N8, K.D, K.E, K.N3]
_REAL_R4 = [K.ALT_RIGHT, K.L, K.Z, K.O, K.N9, K.S, K.W, K.N2]
_REAL_R5 = [K.SPACE, K.ENTER, K.SHIFT_LEFT, K.P, K.N0, K.A, K.Q, K.N1]
_REAL_BODY = [_REAL_R1, _REAL_R2, _REAL_R3, _REAL_R4, _REAL_R5]

_REAL_MENU = _table(
    [K.ENTER, K.ARROW_LEFT, K.ARROW_UP, K.ARROW_RIGHT, K.ARROW_DOWN, K.F1, 0, 0],
    _REAL_R1, _REAL_R2, _REAL_R3,
    [K.PERIOD, K.L, K.Z, K.O, K.N9, K.S, K.W, K.N2],
    _REAL_R5,
)
_REAL_MENU_SHIFT = _table(
    [K.ESCAPE, K.ARROW_LEFT, K.PAGE_UP, K.ARROW_RIGHT, K.PAGE_DOWN, K.ESCAPE, 0, 0],
    [K.B, K.H, K.V, K.Y, K.ARROW_DOWN, K.G, K.T, K.ARROW_LEFT],
    [K.N, K.J, K.C, K.U, K.ARROW_UP, K.F, K.R, K.PAGE_DOWN],
    [K.M, K.K, K.X, K.I, K.ARROW_RIGHT, K.D, K.E, K.N3],
    [K.ALT_RIGHT, K.L, K.Z, K.O, K.PAGE_UP, K.S, K.W, K.N2],
    [K.SPACE, K.ESCAPE, K.SHIFT_LEFT, K.P, K.BACKSPACE, K.A, K.Q, K.F1],
)

_REAL_CURSOR_TOP = [K.ENTER, K.ARROW_LEFT, K.ARROW_UP, K.ARROW_RIGHT, K.ARROW_DOWN,
                    K.F1, K.F11, K.F12]
_REAL_JOY_TOP = [0, 0, 0, 0, 0, K.F1, K.F11, K.F12]

_REAL_KEYMAP: _Keymap = (
    _table(_REAL_CURSOR_TOP, *_REAL_BODY),
    _table(_REAL_CURSOR_TOP, *_REAL_BODY),
    _table(_REAL_JOY_TOP, *_REAL_BODY),
    _table(_REAL_JOY_TOP, *_REAL_BODY),
    _REAL_MENU,
    _REAL_MENU_SHIFT,
)

_REAL_BOB_KEYMAP: _Keymap = (
    _table([K.N0, K.ARROW_LEFT, K.ARROW_UP, K.ARROW_RIGHT, K.ARROW_DOWN, K.F1, K.F9, K.F10],
           *_REAL_BODY),
    _table([K.ENTER, K.ARROW_LEFT, K.ARROW_UP, K.ARROW_RIGHT, K.ARROW_DOWN, K.F1, 0, 0],
           *_REAL_BODY),
    _table([0, 0, 0, 0, 0, K.F1, K.F9, K.F10], *_REAL_BODY),
    _table([0, 0, 0, 0, 0, K.F1, 0, 0], *_REAL_BODY),
    _REAL_MENU,
    _REAL_MENU_SHIFT,
)


def _col(column: int) -> int:
    """Bit for a 1-based column number."""
    return 1 << (column - 1)


_Key = tuple[int, int]


@dataclass(frozen=True)
class _BoardSpec:
    column_pins: tuple[int, ...]
    row_pins: tuple[int, ...]
    keymap: _Keymap
    directions: dict[str, _Key]
    picozx: bool
    real_keyboard: bool
    joystick_offset: int
    alt: _Key | None = None
    shift: _Key | None = None
    cursor: _Key | None = None
    kempston_key: _Key | None = None


_MAX_DIRECTIONS = {
    "fire": (4, 0x20), "up": (2, 0x20), "down": (0, 0x20),
    "left": (1, 0x20), "right": (3, 0x20),
}
_MAX_PINS = ((1, 2, 3, 4, 5, 14), (6, 9, 15, 8, 7, 22))
_REAL_PINS = ((18, 19, 20, 21, 22, 26, 27, 28), (8, 9, 14, 15, 16, 17))
_REAL_DIRECTIONS = {
    "fire": (0, _col(1)), "left": (0, _col(2)), "up": (0, _col(3)),
    "right": (0, _col(4)), "down": (0, _col(5)),
}


def _real_spec(keymap: _Keymap) -> _BoardSpec:
    return _BoardSpec(
        *_REAL_PINS, keymap, _REAL_DIRECTIONS, picozx=True, real_keyboard=True,
        joystick_offset=2, shift=(5, 0x04),
        cursor=(0, _col(7)), kempston_key=(0, _col(8)),
    )


class Board(enum.Enum):
    """Keyboard hardware variants."""

    VGA = "vga"
    MAX = "max"
    ZX = "zx"
    PICOZX = "picozx"
    PICOZX_REAL = "picozx_real"
    PICOZX_REAL_BOB = "picozx_real_bob"
    PICOZX_REAL_DM = "picozx_real_dm"

    @property
    def column_pins(self) -> tuple[int, ...]:
        return _SPECS[self].column_pins

    @property
    def row_pins(self) -> tuple[int, ...]:
        return _SPECS[self].row_pins

    @property
    def is_picozx(self) -> bool:
        return _SPECS[self].picozx

    @property
    def real_keyboard(self) -> bool:
        return _SPECS[self].real_keyboard


_SPECS: dict[Board, _BoardSpec] = {
    Board.VGA: _BoardSpec(
        (20, 21, 22, 26, 27, 28), (14, 15, 16, 17, 18, 19), _MAX_KEYMAP,
        _MAX_DIRECTIONS, picozx=False, real_keyboard=False, joystick_offset=1,
        alt=(5, 0x20),
    ),
    Board.MAX: _BoardSpec(
        *_MAX_PINS, _MAX_KEYMAP, _MAX_DIRECTIONS, picozx=False,
        real_keyboard=False, joystick_offset=1, alt=(5, 0x20),
    ),
    Board.ZX: _BoardSpec(
        *_MAX_PINS, _MAX_KEYMAP, _MAX_DIRECTIONS, picozx=False,
        real_keyboard=False, joystick_offset=1, alt=(5, 0x20),
    ),
    Board.PICOZX: _BoardSpec(
        (19, 20, 21, 22, 26, 27, 28), (8, 9, 14, 15, 16, 17, 18), _PZX_KEYMAP,
        {"fire": (0, 0x01), "left": (0, 0x02), "up": (0, 0x04),
         "right": (0, 0x08), "down": (0, 0x10)},
        picozx=True, real_keyboard=False, joystick_offset=2,
        shift=(0, 0x20), cursor=(6, 0x20), kempston_key=(6, 0x40),
    ),
    Board.PICOZX_REAL: _real_spec(_REAL_KEYMAP),
    Board.PICOZX_REAL_BOB: _real_spec(_REAL_BOB_KEYMAP),
    Board.PICOZX_REAL_DM: _BoardSpec(
        *_REAL_PINS, _REAL_KEYMAP,
        {"fire": (0, _col(2)), "left": (0, _col(3)), "up": (0, _col(4)),
         "right": (0, _col(5)), "down": (0, _col(6))},
        picozx=True, real_keyboard=True, joystick_offset=2, shift=(5, 0x04),
    ),
}


@dataclass(frozen=True)
class KeyboardReport:
    """A HID boot keyboard report: modifier bits and up to six key codes."""

    modifier: int = 0
    keycodes: tuple[int, ...] = field(default=(0,) * REPORT_KEYS)


class KeyScanner:
    """Oversampling, debouncing scanner of a keyboard matrix.

    ``read_columns(row)`` is called with the index of the row currently
    driven and returns a bit mask of the columns that read as pressed.
    """

    settle_delay = 0.002

    def __init__(self, board: Board, read_columns: Callable[[int], int]) -> None:
        self.board = board
        self._spec = _SPECS[board]
        self._read_columns = read_columns
        self._row_count = len(self._spec.row_pins)
        self._column_mask = (1 << len(self._spec.column_pins)) - 1
        self._samples = [[0] * SAMPLES for _ in range(self._row_count)]
        self._debounced = [0] * self._row_count
        self._reports = [KeyboardReport(), KeyboardReport()]
        self._report_index = 0
        self._keymap_index = 0
        self._menu = False
        self._modifier = 0
        self._row = 0
        self._sample = 0
        self._joystick = 0
        self.led = False
        if self._spec.real_keyboard:
            self._joystick_mode()
        else:
            self._cursor_mode()

    def _joystick_mode(self) -> None:
        self._joystick = self._spec.joystick_offset
        self.led = False

    def _cursor_mode(self) -> None:
        self._joystick = 0
        self.led = True

    def _down(self, key: _Key) -> bool:
        row, bit = key
        return bool(self._debounced[row] & bit)

    def scan_row(self) -> None:
        """Sample the driven row, move to the next and debounce it."""
        columns = self._read_columns(self._row) & self._column_mask
        self._samples[self._row][self._sample] = columns
        self._row += 1
        if self._row >= self._row_count:
            self._row = 0
            self._sample = (self._sample + 1) % SAMPLES

        any_on = 0
        all_on = self._column_mask
        for sample in self._samples[self._row]:
            any_on |= sample
            all_on &= sample
        # A key only changes state when every sample agrees.
        self._debounced[self._row] = (all_on | self._debounced[self._row]) & any_on

    def scan_matrix(self) -> None:
        """Scan every row once, pausing for the lines to settle."""
        for _ in range(self._row_count):
            if self.settle_delay:
                time.sleep(self.settle_delay)
            self.scan_row()

    def fire_raw(self) -> bool:
        """Scan the matrix and report whether any recent sample held fire."""
        self.scan_matrix()
        row, bit = self._spec.directions["fire"]
        return any(sample & bit for sample in self._samples[row])

    def kempston(self) -> int:
        """The Kempston joystick byte from the direction keys."""
        if not self._joystick or self._menu:
            return 0
        value = 0
        for name, key in self._spec.directions.items():
            if self._down(key):
                value |= _KEMPSTON_BITS[name]
        return value

    def set_menu_mode(self, menu: bool) -> None:
        """Switch to the menu key maps; only PicoZX boards have them."""
        if self._spec.picozx:
            self._menu = bool(menu)

    def menu_mode(self) -> bool:
        return self._menu

    def _alt_keys(self) -> bool:
        spec = self._spec
        alt_down = self._down(spec.alt)
        if alt_down:
            dirs = spec.directions
            if self._down(dirs["up"]):
                self._modifier |= MODIFIER_LEFT_SHIFT
            elif self._down(dirs["down"]):
                self._modifier &= ~MODIFIER_LEFT_SHIFT
            if self._down(dirs["right"]):
                self._keymap_index = 2 + self._joystick
            elif self._down(dirs["left"]):
                self._keymap_index = self._joystick
            if self._debounced[3] & (1 << 3):
                self._cursor_mode()
                self._keymap_index &= ~1
            elif self._debounced[3] & (1 << 4):
                self._joystick_mode()
                self._keymap_index |= 1
            for name in ("up", "down", "right", "left"):
                row, bit = dirs[name]
                self._debounced[row] &= ~bit
            self._debounced[3] &= ~((1 << 3) | (1 << 4))
        return alt_down

    def hid_reports(self) -> tuple[KeyboardReport, KeyboardReport]:
        """Build the current report; returns it with the previous one."""
        spec = self._spec
        if spec.alt is not None:
            alt_down = self._alt_keys()
            modifier = self._modifier
            if alt_down and (self._debounced[0] | self._debounced[1] | self._debounced[2]) & 31:
                modifier |= MODIFIER_LEFT_CTRL
            table = spec.keymap[4 if alt_down else self._keymap_index]
        else:
            shift = self._down(spec.shift)
            if shift and spec.cursor is not None:
                if self._down(spec.cursor):
                    self._cursor_mode()
                if self._down(spec.kempston_key):
                    self._joystick_mode()
            self._keymap_index = (4 if self._menu else self._joystick) + int(shift)
            modifier = self._modifier
            if shift:
                modifier |= MODIFIER_LEFT_SHIFT
            table = spec.keymap[self._keymap_index]

        codes: list[int] = []
        for row, bits in enumerate(self._debounced):
            for column in range(bits.bit_length()):
                if not (bits >> column) & 1:
                    continue
                if len(codes) >= REPORT_KEYS:
                    codes = [int(HidKey.ERROR_ROLLOVER)] * REPORT_KEYS
                    break
                code = table[row][column]
                if code:
                    codes.append(code)
        codes += [0] * (REPORT_KEYS - len(codes))

        current = KeyboardReport(modifier & 0xFF, tuple(codes))
        self._reports[self._report_index & 1] = current
        self._report_index += 1
        return current, self._reports[self._report_index & 1]