import pytest

from stterm.config import Config
from stterm.glyph import Attr, CursorState, Glyph
from stterm.screen import Charset, Screen, TermMode
from stterm.selection import SelectionSnap, SelectionType


def put(screen, text, y=0, x0=0):
    for offset, ch in enumerate(text):
        screen.set_char(ord(ch), screen.cursor.attr, x0 + offset, y)


def row(screen, y):
    return "".join(chr(g.u) for g in screen.lines[y])


def test_new_screen_is_blank_and_sized():
    screen = Screen(10, 5)
    assert len(screen.lines) == 5
    assert all(len(line) == 10 for line in screen.lines)
    assert all(row(screen, y) == " " * 10 for y in range(5))
    assert (screen.top, screen.bot) == (0, 4)
    assert screen.mode == TermMode.WRAP | TermMode.UTF8
    assert not screen.altscreen


def test_default_colours_from_config():
    cfg = Config()
    screen = Screen(4, 2, cfg)
    assert all(g.fg == cfg.defaultfg and g.bg == cfg.defaultbg for g in screen.lines[0])


def test_tab_stops_every_tabspaces():
    screen = Screen(20, 2)
    stops = [i for i, t in enumerate(screen.tabs) if t]
    assert stops == [8, 16]


def test_resize_wider_adds_tab_stops():
    screen = Screen(10, 3)
    screen.resize(20, 3)
    assert [i for i, t in enumerate(screen.tabs) if t] == [8, 16]
    assert all(len(line) == 20 for line in screen.lines + screen.alt_lines)


def test_resize_rejects_empty_size():
    screen = Screen(10, 3)
    with pytest.raises(ValueError):
        screen.resize(0, 3)
    with pytest.raises(ValueError):
        screen.resize(3, 0)


def test_resize_keeps_content():
    screen = Screen(10, 4)
    put(screen, "abc")
    screen.resize(5, 2)
    assert row(screen, 0) == "abc  "
    assert len(screen.lines) == 2


def test_resize_slides_to_keep_cursor_row():
    screen = Screen(10, 5)
    put(screen, "z", y=4)
    screen.move_to(0, 4)
    screen.resize(10, 2)
    assert row(screen, 1).startswith("z")
    assert screen.cursor.y == 1


def test_line_length_and_wrap():
    screen = Screen(6, 2)
    put(screen, "ab")
    assert screen.line_length(0) == 2
    screen.lines[0][5].mode |= Attr.WRAP
    assert screen.line_length(0) == 6
    assert screen.line_length(1) == 0


def test_move_to_clamps_and_clears_wrapnext():
    screen = Screen(10, 5)
    screen.cursor.state |= CursorState.WRAPNEXT
    screen.move_to(50, -3)
    assert (screen.cursor.x, screen.cursor.y) == (9, 0)
    assert not screen.cursor.state & CursorState.WRAPNEXT


def test_move_to_abs_in_origin_mode():
    screen = Screen(10, 10)
    screen.set_scroll_region(2, 5)
    screen.cursor.state |= CursorState.ORIGIN
    screen.move_to_abs(0, 1)
    assert screen.cursor.y == 3
    screen.move_to_abs(0, 40)
    assert screen.cursor.y == 5


def test_set_char_uses_dec_graphics():
    screen = Screen(5, 1)
    screen.trantbl[0] = Charset.GRAPHIC0
    screen.set_char(ord("q"), screen.cursor.attr, 0, 0)
    assert chr(screen.lines[0][0].u) == "─"
    screen.trantbl[0] = Charset.USA
    screen.set_char(ord("q"), screen.cursor.attr, 1, 0)
    assert chr(screen.lines[0][1].u) == "q"


def test_set_char_over_wide_clears_dummy():
    screen = Screen(5, 1)
    screen.lines[0][0].mode = Attr.WIDE
    screen.lines[0][1].mode = Attr.WDUMMY
    screen.lines[0][1].u = 0
    screen.set_char(ord("x"), screen.cursor.attr, 0, 0)
    assert screen.lines[0][1].u == ord(" ")
    assert not screen.lines[0][1].mode & Attr.WDUMMY


def test_set_char_copies_attributes():
    screen = Screen(5, 1)
    attr = Glyph(mode=Attr.BOLD, fg=3, bg=4)
    screen.set_char(ord("x"), attr, 2, 0)
    cell = screen.lines[0][2]
    assert (cell.mode, cell.fg, cell.bg) == (Attr.BOLD, 3, 4)
    assert cell is not attr
    assert screen.dirty[0]


def test_clear_region_swaps_corners_and_uses_cursor_colours():
    screen = Screen(6, 3)
    put(screen, "abcdef", y=1)
    screen.cursor.attr.bg = 7
    screen.clear_region(4, 1, 1, 1)
    assert row(screen, 1) == "a    f"
    assert screen.lines[1][2].bg == 7


def test_delete_chars():
    screen = Screen(6, 1)
    put(screen, "abcdef")
    screen.move_to(1, 0)
    screen.delete_chars(2)
    assert row(screen, 0) == "adef  "


def test_insert_blanks():
    screen = Screen(6, 1)
    put(screen, "abcdef")
    screen.move_to(1, 0)
    screen.insert_blanks(2)
    assert row(screen, 0) == "a  bcd"
    assert len({id(g) for g in screen.lines[0]}) == 6


def test_scroll_up_and_down():
    screen = Screen(3, 3)
    for y, text in enumerate(["aaa", "bbb", "ccc"]):
        put(screen, text, y=y)
    screen.scroll_up(0, 1)
    assert [row(screen, y) for y in range(3)] == ["bbb", "ccc", "   "]
    screen.scroll_down(0, 1)
    assert [row(screen, y) for y in range(3)] == ["   ", "bbb", "ccc"]


def test_delete_and_insert_lines_respect_region():
    screen = Screen(3, 4)
    for y, text in enumerate(["aaa", "bbb", "ccc", "ddd"]):
        put(screen, text, y=y)
    screen.set_scroll_region(1, 2)
    screen.move_to(0, 1)
    screen.delete_lines(1)
    assert [row(screen, y) for y in range(4)] == ["aaa", "ccc", "   ", "ddd"]
    screen.insert_blank_lines(1)
    assert [row(screen, y) for y in range(4)] == ["aaa", "   ", "ccc", "ddd"]


def test_new_line_scrolls_at_bottom():
    screen = Screen(3, 2)
    put(screen, "top", y=0)
    put(screen, "bot", y=1)
    screen.move_to(2, 1)
    screen.new_line(True)
    assert row(screen, 0) == "bot"
    assert (screen.cursor.x, screen.cursor.y) == (0, 1)
    screen.move_to(2, 0)
    screen.new_line(False)
    assert (screen.cursor.x, screen.cursor.y) == (2, 1)


def test_put_tab_forward_and_back():
    screen = Screen(20, 1)
    screen.put_tab(1)
    assert screen.cursor.x == 8
    screen.put_tab(5)
    assert screen.cursor.x == 19
    screen.put_tab(-1)
    assert screen.cursor.x == 16
    screen.put_tab(-4)
    assert screen.cursor.x == 0


def test_set_scroll_region_orders_and_clamps():
    screen = Screen(5, 10)
    screen.set_scroll_region(8, 2)
    assert (screen.top, screen.bot) == (2, 8)
    screen.set_scroll_region(-5, 99)
    assert (screen.top, screen.bot) == (0, 9)


def test_swap_screen_keeps_buffers_apart():
    screen = Screen(4, 2)
    put(screen, "main")
    screen.dirty = [False, False]
    screen.swap_screen()
    assert screen.altscreen
    assert row(screen, 0) == "    "
    assert screen.dirty == [True, True]
    screen.swap_screen()
    assert not screen.altscreen
    assert row(screen, 0) == "main"


def test_save_and_load_cursor():
    screen = Screen(10, 5)
    screen.move_to(3, 2)
    screen.cursor.attr.fg = 5
    screen.save_cursor()
    screen.move_to(0, 0)
    screen.cursor.attr.fg = 1
    screen.load_cursor()
    assert (screen.cursor.x, screen.cursor.y, screen.cursor.attr.fg) == (3, 2, 5)


def test_dump_line_and_dump():
    screen = Screen(5, 2)
    put(screen, "hi")
    assert screen.dump_line(0) == b"hi\n"
    assert screen.dump_line(1) == b"\n"
    assert screen.dump() == b"hi\n\n"


def test_dump_line_encodes_utf8():
    screen = Screen(5, 1)
    put(screen, "é")
    assert screen.dump_line(0) == "é\n".encode("utf-8")


def test_has_attr_and_set_dirty_attr():
    screen = Screen(5, 3)
    assert not screen.has_attr(Attr.BLINK)
    screen.lines[1][1].mode |= Attr.BLINK
    assert screen.has_attr(Attr.BLINK)
    screen.dirty = [False] * 3
    screen.set_dirty_attr(Attr.BLINK)
    assert screen.dirty == [False, True, False]


def test_selection_text():
    screen = Screen(12, 2)
    put(screen, "hello world")
    screen.selection.start(screen, 0, 0, SelectionSnap.NONE)
    screen.selection.extend(screen, 4, 0, SelectionType.REGULAR, True)
    assert screen.selection_text() == "hello"


def test_clearing_selected_cell_drops_selection():
    screen = Screen(12, 2)
    put(screen, "hello world")
    screen.selection.start(screen, 0, 0, SelectionSnap.NONE)
    screen.selection.extend(screen, 4, 0, SelectionType.REGULAR, False)
    screen.clear_region(0, 0, 11, 0)
    assert screen.selection_text() is None


def test_reset_restores_defaults():
    screen = Screen(10, 4)
    put(screen, "junk")
    screen.mode |= TermMode.INSERT
    screen.set_scroll_region(1, 2)
    screen.trantbl[0] = Charset.GRAPHIC0
    screen.reset()
    assert row(screen, 0) == " " * 10
    assert screen.mode == TermMode.WRAP | TermMode.UTF8
    assert (screen.top, screen.bot) == (0, 3)
    assert screen.trantbl == [Charset.USA] * 4