import pytest

from zxpico.st7789 import (
    MADCTL,
    LcdCommand,
    encode_init_sequence,
    init_sequence,
    parse_init_sequence,
)

SOURCE_TABLE = bytes([
    1, 20, 0x01,
    1, 10, 0x11,
    2, 2, 0x3A, 0x63,
    2, 0, 0x36, 0x30,
    5, 0, 0x2A, 0x00, 0x00, 0x01, 0x40,
    5, 0, 0x2B, 0x00, 0x00, 0x00, 0xF0,
    1, 2, 0x21,
    1, 2, 0x13,
    1, 2, 0x29,
    0,
])


def test_encoded_default_matches_table():
    assert encode_init_sequence(init_sequence()) == SOURCE_TABLE


def test_parse_table_gives_default_sequence():
    assert parse_init_sequence(SOURCE_TABLE) == init_sequence()


def test_mirror_changes_madctl():
    madctl = [c for c in init_sequence(mirror_x=True) if c.command == MADCTL]
    assert madctl[0].params == bytes([0x70])


def test_reset_delay():
    assert init_sequence()[0].delay_ms == 20 * 5


def test_round_trip_custom_commands():
    commands = [LcdCommand(0x10, b"\x01\x02", 15), LcdCommand(0x20)]
    assert parse_init_sequence(encode_init_sequence(commands)) == commands


def test_empty_sequence_is_terminator_only():
    assert parse_init_sequence(encode_init_sequence([])) == []


def test_parse_missing_terminator():
    with pytest.raises(ValueError):
        parse_init_sequence(SOURCE_TABLE[:-1])


def test_parse_truncated():
    with pytest.raises(ValueError):
        parse_init_sequence(bytes([5, 0, 0x2A, 0x00]))


def test_encode_rejects_odd_delay():
    with pytest.raises(ValueError):
        encode_init_sequence([LcdCommand(0x01, b"", 7)])


def test_encode_rejects_long_payload():
    with pytest.raises(ValueError):
        encode_init_sequence([LcdCommand(0x01, bytes(255))])


def test_encode_rejects_bad_command():
    with pytest.raises(ValueError):
        encode_init_sequence([LcdCommand(0x100)])