import pytest

from zxpico import keyscan
from zxpico.keyscan import Board, HidKey, KeyboardReport, KeyScanner


class Matrix:
    def __init__(self):
        self.pressed = set()
        self.rows_read = []

    def __call__(self, row):
        self.rows_read.append(row)
        return sum(1 << col for r, col in self.pressed if r == row)


def make(board, *keys):
    matrix = Matrix()
    matrix.pressed.update(keys)
    scanner = KeyScanner(board, matrix)
    scanner.settle_delay = 0
    return scanner, matrix


def settle(scanner, passes=6):
    for _ in range(passes):
        scanner.scan_matrix()


def test_idle_report_is_empty():
    scanner, _ = make(Board.VGA)
    settle(scanner)
    curr, prev = scanner.hid_reports()
    assert curr == KeyboardReport()
    assert prev == KeyboardReport()


def test_vga_key_maps_to_hid_code():
    scanner, _ = make(Board.VGA, (0, 0))
    settle(scanner)
    curr, _ = scanner.hid_reports()
    assert curr.keycodes == (HidKey.SPACE, 0, 0, 0, 0, 0)
    assert curr.modifier == 0


def test_previous_report_is_last_current():
    scanner, matrix = make(Board.VGA, (0, 0))
    settle(scanner)
    first, _ = scanner.hid_reports()
    matrix.pressed = {(1, 1)}
    settle(scanner)
    second, prev = scanner.hid_reports()
    assert prev == first
    assert second.keycodes[0] == HidKey.L


def test_rows_read_in_order():
    scanner, matrix = make(Board.PICOZX)
    scanner.scan_matrix()
    scanner.scan_matrix()
    assert matrix.rows_read == list(range(7)) * 2


def test_debounce_needs_all_samples():
    scanner, matrix = make(Board.VGA, (0, 0))
    scanner.scan_matrix()
    curr, _ = scanner.hid_reports()
    assert curr.keycodes == (0,) * 6
    settle(scanner)
    curr, _ = scanner.hid_reports()
    assert curr.keycodes[0] == HidKey.SPACE
    matrix.pressed.clear()
    scanner.scan_matrix()
    curr, _ = scanner.hid_reports()
    assert curr.keycodes[0] == HidKey.SPACE
    settle(scanner)
    curr, _ = scanner.hid_reports()
    assert curr.keycodes == (0,) * 6


def test_rollover_when_more_than_six_keys():
    keys = [(2, c) for c in range(5)] + [(4, c) for c in range(3)]
    scanner, _ = make(Board.VGA, *keys)
    settle(scanner)
    curr, _ = scanner.hid_reports()
    assert curr.keycodes == (HidKey.ERROR_ROLLOVER,) * 6


def test_vga_starts_in_cursor_mode():
    scanner, _ = make(Board.VGA, (4, 5))
    settle(scanner)
    assert scanner.led is True
    assert scanner.kempston() == 0
    curr, _ = scanner.hid_reports()
    assert curr.keycodes[0] == HidKey.ESCAPE


def test_vga_alt_v_switches_to_joystick():
    scanner, matrix = make(Board.VGA, (5, 5), (3, 4))
    settle(scanner)
    curr, _ = scanner.hid_reports()
    assert curr.keycodes == (0,) * 6
    assert scanner.led is False
    matrix.pressed = {(4, 5), (2, 5)}
    settle(scanner)
    assert scanner.kempston() == keyscan.KEMPSTON_FIRE | keyscan.KEMPSTON_UP


def test_vga_alt_up_latches_shift():
    scanner, matrix = make(Board.VGA, (5, 5), (2, 5))
    settle(scanner)
    scanner.hid_reports()
    matrix.pressed = {(0, 0)}
    settle(scanner)
    curr, _ = scanner.hid_reports()
    assert curr.modifier & keyscan.MODIFIER_LEFT_SHIFT
    assert curr.keycodes[0] == HidKey.SPACE


def test_vga_alt_with_quick_save_key_sets_ctrl():
    scanner, _ = make(Board.VGA, (5, 5), (2, 0))
    settle(scanner)
    curr, _ = scanner.hid_reports()
    assert curr.modifier & keyscan.MODIFIER_LEFT_CTRL
    assert curr.keycodes[0] == HidKey.F5


def test_menu_mode_ignored_on_vga():
    scanner, _ = make(Board.VGA)
    scanner.set_menu_mode(True)
    assert scanner.menu_mode() is False


def test_real_keyboard_starts_in_joystick_mode():
    scanner, _ = make(Board.PICOZX_REAL, (0, 0))
    settle(scanner)
    assert scanner.kempston() == keyscan.KEMPSTON_FIRE
    curr, _ = scanner.hid_reports()
    assert curr.keycodes == (0,) * 6


def test_real_keyboard_menu_mode():
    scanner, _ = make(Board.PICOZX_REAL, (0, 0))
    settle(scanner)
    scanner.set_menu_mode(True)
    assert scanner.menu_mode() is True
    assert scanner.kempston() == 0
    curr, _ = scanner.hid_reports()
    assert curr.keycodes[0] == HidKey.ENTER


def test_real_keyboard_shifted_menu():
    scanner, _ = make(Board.PICOZX_REAL, (0, 0), (5, 2))
    settle(scanner)
    scanner.set_menu_mode(True)
    curr, _ = scanner.hid_reports()
    assert curr.modifier == keyscan.MODIFIER_LEFT_SHIFT
    assert curr.keycodes[:2] == (HidKey.ESCAPE, HidKey.SHIFT_LEFT)


def test_bob_and_standard_keymaps_differ():
    standard, _ = make(Board.PICOZX_REAL, (0, 6))
    bob, _ = make(Board.PICOZX_REAL_BOB, (0, 6))
    settle(standard)
    settle(bob)
    assert standard.hid_reports()[0].keycodes[0] == HidKey.F11
    assert bob.hid_reports()[0].keycodes[0] == HidKey.F9


def test_picozx_cursor_then_joystick():
    scanner, matrix = make(Board.PICOZX, (0, 2))
    settle(scanner)
    assert scanner.kempston() == 0
    assert scanner.hid_reports()[0].keycodes[0] == HidKey.ARROW_UP
    matrix.pressed = {(0, 5), (6, 6)}
    settle(scanner)
    scanner.hid_reports()
    matrix.pressed = {(0, 2)}
    settle(scanner)
    assert scanner.kempston() == keyscan.KEMPSTON_UP
    assert scanner.hid_reports()[0].keycodes == (0,) * 6


def test_dm_fire_column():
    scanner, _ = make(Board.PICOZX_REAL_DM, (0, 1))
    settle(scanner)
    assert scanner.kempston() == keyscan.KEMPSTON_FIRE


@pytest.mark.parametrize(
    "key, bit",
    [
        ((0, 0), keyscan.KEMPSTON_FIRE),
        ((0, 1), keyscan.KEMPSTON_LEFT),
        ((0, 2), keyscan.KEMPSTON_UP),
        ((0, 3), keyscan.KEMPSTON_RIGHT),
        ((0, 4), keyscan.KEMPSTON_DOWN),
    ],
)
def test_real_keyboard_directions(key, bit):
    scanner, _ = make(Board.PICOZX_REAL, key)
    settle(scanner)
    assert scanner.kempston() == bit


def test_fire_raw():
    pressed, _ = make(Board.VGA, (4, 5))
    idle, _ = make(Board.VGA)
    assert pressed.fire_raw() is True
    assert idle.fire_raw() is False


@pytest.mark.parametrize("board", list(Board))
def test_scan_reads_every_row_of_board(board):
    scanner, matrix = make(board)
    scanner.scan_matrix()
    assert matrix.rows_read == list(range(len(board.row_pins)))
    if board.real_keyboard:
        assert len(board.column_pins) == 8
    assert len(set(board.column_pins) & set(board.row_pins)) == 0