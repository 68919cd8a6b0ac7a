import pytest

from stterm.config import Config
from stterm.glyph import Attr, Glyph
from stterm.selection import Selection, SelectionMode, SelectionSnap, SelectionType


class FakeScreen:
    def __init__(self, cols, rows, altscreen=False):
        self.cols = cols
        self.rows = rows
        self.top = 0
        self.bot = rows - 1
        self.altscreen = altscreen
        self.config = Config()
        self.lines = [[Glyph(u=ord(" ")) for _ in range(cols)] for _ in range(rows)]
        self.dirty = [False] * rows

    def write(self, y, text, wrap=False):
        for x, ch in enumerate(text):
            self.lines[y][x] = Glyph(u=ord(ch))
        if wrap:
            self.lines[y][self.cols - 1].mode |= Attr.WRAP

    def line_length(self, y):
        line = self.lines[y]
        if line[-1].mode & Attr.WRAP:
            return self.cols
        n = self.cols
        while n > 0 and line[n - 1].u == ord(" "):
            n -= 1
        return n

    def set_dirty(self, top, bot):
        top = min(max(top, 0), self.rows - 1)
        bot = min(max(bot, 0), self.rows - 1)
        for y in range(top, bot + 1):
            self.dirty[y] = True


@pytest.fixture
def screen():
    return FakeScreen(12, 4)


def select(screen, x1, y1, x2, y2, kind=SelectionType.REGULAR, snap=SelectionSnap.NONE):
    sel = Selection()
    sel.start(screen, x1, y1, snap)
    sel.extend(screen, x2, y2, kind, False)
    sel.extend(screen, x2, y2, kind, True)
    return sel


def test_new_selection_is_empty(screen):
    sel = Selection()
    assert sel.text(screen) is None
    assert sel.selected(0, 0, False) is False


def test_single_line(screen):
    screen.write(0, "hello world")
    sel = select(screen, 0, 0, 4, 0)
    assert sel.text(screen) == "hello"
    assert sel.mode == SelectionMode.IDLE
    assert sel.selected(2, 0, False)
    assert not sel.selected(5, 0, False)


def test_multi_line(screen):
    screen.write(0, "abc")
    screen.write(1, "def")
    sel = select(screen, 1, 0, 1, 1)
    assert sel.text(screen) == "bc\nde"


def test_backwards_selection_is_normalized(screen):
    screen.write(0, "abc")
    screen.write(1, "def")
    sel = select(screen, 1, 1, 1, 0)
    assert (sel.nb.y, sel.ne.y) == (0, 1)
    assert sel.text(screen) == "bc\nde"


def test_empty_line_yields_newline(screen):
    screen.write(0, "ab")
    screen.write(2, "cd")
    sel = select(screen, 0, 0, 1, 2)
    assert sel.text(screen) == "ab\n\ncd"


def test_wrapped_line_joins(screen):
    small = FakeScreen(4, 3)
    small.write(0, "abcd", wrap=True)
    small.write(1, "ef")
    sel = select(small, 0, 0, 1, 1)
    assert sel.text(small) == "abcdef"


def test_word_snap(screen):
    screen.write(0, "foo bar baz")
    sel = Selection()
    sel.start(screen, 5, 0, SelectionSnap.WORD)
    assert sel.mode == SelectionMode.READY
    assert sel.text(screen) == "bar"
    assert sel.selected(4, 0, False)
    assert not sel.selected(3, 0, False)


def test_line_snap(screen):
    screen.write(0, "foo bar baz")
    sel = Selection()
    sel.start(screen, 3, 0, SelectionSnap.LINE)
    assert sel.text(screen) == "foo bar baz\n"
    assert sel.nb.x == 0
    assert sel.ne.x == screen.cols - 1


def test_rectangular(screen):
    screen.write(0, "abcd")
    screen.write(1, "efgh")
    sel = select(screen, 1, 0, 2, 1, kind=SelectionType.RECTANGULAR)
    assert sel.text(screen) == "bc\nfg"
    assert not sel.selected(3, 0, False)
    assert sel.selected(2, 1, False)


def test_wide_char_dummy_skipped(screen):
    screen.lines[0][0] = Glyph(u=ord("界"), mode=Attr.WIDE)
    screen.lines[0][1] = Glyph(u=0, mode=Attr.WDUMMY)
    screen.lines[0][2] = Glyph(u=ord("x"))
    sel = select(screen, 0, 0, 2, 0)
    assert sel.text(screen) == "界x"


def test_altscreen_mismatch(screen):
    screen.write(0, "hello")
    sel = select(screen, 0, 0, 4, 0)
    assert sel.selected(1, 0, True) is False


def test_clear_marks_dirty(screen):
    screen.write(1, "hello")
    sel = select(screen, 0, 1, 4, 1)
    screen.dirty = [False] * screen.rows
    sel.clear(screen)
    assert sel.text(screen) is None
    assert screen.dirty[1] is True


def test_extend_when_idle_does_nothing(screen):
    sel = Selection()
    sel.extend(screen, 3, 1, SelectionType.REGULAR, False)
    assert sel.text(screen) is None
    assert sel.mode == SelectionMode.IDLE


def test_done_on_empty_clears(screen):
    screen.write(0, "hello")
    sel = Selection()
    sel.start(screen, 0, 0, SelectionSnap.NONE)
    assert sel.mode == SelectionMode.EMPTY
    sel.extend(screen, 2, 0, SelectionType.REGULAR, True)
    assert sel.text(screen) is None


def test_scroll_moves_selection(screen):
    screen.write(1, "hello")
    sel = select(screen, 0, 1, 4, 1)
    sel.scroll(screen, 0, -1)
    assert sel.ob.y == 0
    assert sel.nb.y == 0


def test_scroll_off_top_clears(screen):
    screen.write(0, "hello")
    sel = select(screen, 0, 0, 4, 0)
    sel.scroll(screen, 0, -1)
    assert sel.text(screen) is None


def test_scroll_straddling_region_clears(screen):
    screen.write(0, "ab")
    screen.write(2, "cd")
    sel = select(screen, 0, 0, 1, 2)
    sel.scroll(screen, 1, -1)
    assert sel.text(screen) is None


def test_scroll_outside_region_keeps(screen):
    screen.write(0, "ab")
    sel = select(screen, 0, 0, 1, 0)
    sel.scroll(screen, 2, -1)
    assert sel.ob.y == 0
    assert sel.text(screen) == "ab"