# zxpico

This package holds parts for running a ZX Spectrum on small microcontroller
boards. It is plain Python and needs no third-party libraries.

- **`zxpico.scanvideo`** turns Spectrum screen and attribute memory into
  composable scanline command words. `prepare_scanline` builds one display
  line. `prepare_blankline` builds a black line. `colour_words` gives the
  16-colour palette for each `ColourEncoding` (`BGYR_1111`, `RGBY_1111`,
  `RGB_222`, `RGB_332`, `RGB_555`). `BorderLayout` sets the widths of the
  border parts of a line.
- **`zxpico.rgb444`** makes the words for an ST7789 LCD, with two RGB444 pixels
  in each word:
  - `scanline_words` returns the 160 words of one line.
  - `frame_words` yields every word of a 240-line frame.
  - `colour_words(inverse, rgb_order)` builds the palette.
- **`zxpico.st7789`** holds the ST7789 start-up command sequence as
  `LcdCommand` records. `init_sequence(mirror_x)` builds the sequence.
  `encode_init_sequence` and `parse_init_sequence` convert it to and from a
  zero-terminated table of length, delay, command byte and parameters.
- **`zxpico.settings`** handles volume, joystick mode (`JoystickMode`) and mouse
  mode (`MouseMode`). These are kept in `SettingValues`. `Settings` supplies
  defaults and sanitises values: volume is capped at 0x100, and unknown modes
  fall back to Kempston. It can also save and load values through an optional
  mapping.
- **`zxpico.keyscan`** scans a keyboard matrix for the boards listed in
  `Board`. `KeyScanner` oversamples and debounces the matrix. It builds HID
  boot keyboard reports (`KeyboardReport`) and a Kempston joystick byte. It
  also supports menu key maps on PicoZX boards.
- **`zxpico.picomputer_joystick`**: `PicomputerJoystick` is a Kempston joystick
  that reads its state from a `KeyScanner`. The `enabled` attribute switches
  it on and off.

## Installation

```
pip install .
```

## Examples

Render one line of the picture area:

```python
from zxpico.scanvideo import BorderLayout, ColourEncoding, prepare_scanline

screen = bytes(6144)
attrs = bytes([0x38]) * 768          # black ink on white paper
layout = BorderLayout(border_pixels=64, left_coloured=32, right_coloured=32)
words = prepare_scanline(100, 0, screen, attrs, 1, ColourEncoding.RGB_222, layout)
```

Build the words for a whole LCD frame:

```python
from zxpico.rgb444 import colour_words, frame_words

words = list(frame_words(0, bytes(6144), bytes([0x38]) * 768, 7, colour_words()))
assert len(words) == 240 * 160
```

Round-trip the LCD start-up table:

```python
from zxpico.st7789 import encode_init_sequence, init_sequence, parse_init_sequence

table = encode_init_sequence(init_sequence())
assert parse_init_sequence(table) == init_sequence()
```

Save settings and load them back. `load` returns the sanitised values and a
flag that says whether any stored values were found:

```python
from zxpico.settings import JoystickMode, Settings, SettingValues

store = {}
settings = Settings(store)
settings.save(SettingValues(volume=0x80, joystick_mode=JoystickMode.SINCLAIR_LR))
values, found = settings.load()
print(values.volume, values.joystick_mode, found)
```

Without a mapping, `Settings().load()` returns the defaults and `False`. To
store settings somewhere else, subclass `Settings` and override `on_save` and
`on_load`.

Scan a key matrix. You supply the function that reads the columns:

```python
from zxpico.keyscan import Board, KeyScanner
from zxpico.picomputer_joystick import PicomputerJoystick

scanner = KeyScanner(Board.VGA, read_columns=lambda row: 0)
scanner.scan_matrix()
current, previous = scanner.hid_reports()
joystick = PicomputerJoystick(scanner)
print(current.keycodes, joystick.kempston())
```

## What this package does not do

This package does not emulate the Spectrum's CPU or memory. It does not
drive video, LCD, GPIO or audio hardware, and it has no menu system and no
command-line program. The functions here only compute the words, command
tables, reports and settings values. Sending them to a device, and reading
the key matrix lines, is up to the caller. Settings are not written to files
unless you provide a mapping or subclass that does so.

## Running the tests

```
pip install .[test]
pytest
```