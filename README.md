# stterm

`stterm` is the core of a small, simple terminal emulator. It turns the
byte stream a program writes to a terminal into a grid of character
cells. It draws nothing itself: a front end reads the grid and displays
it.

## What it covers

- **Escape sequences** (`stterm.terminal`): C0 and C1 control codes, CSI
  sequences (cursor movement, erasing, insert and delete, scrolling
  regions, SGR attributes with 16, 256 and true colours, ANSI and private
  modes, cursor position reports), and string sequences: OSC titles,
  palette changes and clipboard setting through OSC 52 (only when
  `Config.allowwindowops` is true). DCS, APC and PM strings are read and
  ignored.
- **Screen model** (`stterm.screen`): primary and alternate screens,
  dirty-line tracking, tab stops, the DEC special graphics charset, wide
  characters, autowrap and insert mode, and dumping rows as UTF-8.
- **Selection** (`stterm.selection`): regular and rectangular
  selections, word and line snapping, and the selected text as a string.
- **Sixel graphics** (`stterm.sixel`): a stand-alone decoder that turns
  sixel data into a B, G, R, A pixel buffer, with HLS and RGB palette
  definitions (`stterm.hls`).
- **UTF-8 and base64** (`stterm.utf8`): decoding that tolerates
  incomplete and invalid sequences, and lenient base64 decoding.

## Modules

| Module             | Contents                                                                 |
|--------------------|--------------------------------------------------------------------------|
| `stterm.hls`       | `hls_to_rgb(hue, lum, sat)`                                              |
| `stterm.utf8`      | `utf8_decode`, `utf8_encode`, `utf8_validate`, `base64_decode`           |
| `stterm.sixel`     | `SixelParser`, `SixelImage`, `ParseState`, `SixelError`                  |
| `stterm.glyph`     | `Glyph`, `Cursor`, `Attr`, `CursorState`, `truecolor`, `is_truecolor`    |
| `stterm.config`    | `Config`: colours, tab width, word delimiters, answerback string, …      |
| `stterm.selection` | `Selection`, `SelectionMode`, `SelectionType`, `SelectionSnap`           |
| `stterm.screen`    | `Screen`, `TermMode`, `Charset`                                          |
| `stterm.terminal`  | `Terminal`, `WindowHooks`, `CsiSequence`, `parse_csi`, `parse_str_args`  |

## Using it

```python
from stterm.terminal import Terminal

term = Terminal(cols=20, rows=3)
term.write(b"hello\r\n\x1b[1mworld")
print(term.screen.dump().decode())   # "hello\nworld\n\n"

term.write(b"\x1b[6n")               # cursor position report
assert bytes(term.responses) == b"\x1b[2;6R"
```

`Terminal.write` returns the number of bytes it consumed; an incomplete
UTF-8 sequence at the end is left for the next call. Replies meant for
the program (device attributes, cursor reports) go to the `tty_write`
callable given to `Terminal`, or are collected in `Terminal.responses`.
Printer output (`MODE_PRINT`, `print_screen`, `print_selection`) goes to
the `printer` callable, or is collected in `Terminal.printed`.

Requests for the window system go through a `WindowHooks` object. The
base class records them (`title`, `icon_title`, `modes`, `colors`,
`bells`, `selection`, …), so a front end subclasses it and overrides the
methods it needs: `set_title`, `set_icon_title`, `set_mode`,
`set_pointer_motion`, `set_cursor_style`, `bell`, `set_selection`,
`clip_copy`, `set_color_name`, `clear_window`, `redraw` and
`load_colors`.

After feeding bytes, a front end reads `terminal.screen.lines` (rows of
`Glyph`) and redraws the rows whose `screen.dirty` flag is set. The
selection lives in `screen.selection`; start and extend it with
`Selection.start(screen, ...)` and `Selection.extend(screen, ...)`, and
get its text with `screen.selection_text()`.

Sixel data is decoded separately:

```python
from stterm.sixel import SixelParser

parser = SixelParser(bgcolor=0, cell_width=1, cell_height=1)
parser.parse(b"#1~")
pixels = parser.finalize()   # 4 bytes per pixel: B, G, R, A
```

`SixelParser.parse` raises `SixelError` when data follows an escape
character.

## What it does not do

The package does not start programs, open pseudo-terminals or serial
lines, or read and write them; the caller supplies the bytes to
`Terminal.write` and delivers the replies. It has no window, no
rendering and no keyboard handling, and `Terminal` does not show sixel
images: the decoder is only available on its own.

## Requirements

Python 3.10 or later. The only dependency is `wcwidth`, which gives the
display width of each character.