"""Run-time settings of the terminal."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["Config"]


@dataclass
class Config:
    """Settings consulted by the terminal, selection and tty code."""

    shell: str = "/bin/sh"
    utmp: str | None = None
    scroll: str | None = None
    stty_args: str = "stty raw pass8 nl -echo -iexten -cstopb 38400"
    vtiden: str = "\033[?6c"
    worddelimiters: str = " "
    allowaltscreen: bool = True
    allowwindowops: bool = False
    termname: str = "st-256color"
    tabspaces: int = 8
    defaultfg: int = 258
    defaultbg: int = 259
    defaultcs: int = 256

    def __post_init__(self) -> None:
        if self.tabspaces < 1:
            raise ValueError("tabspaces must be at least 1")

    def is_delimiter(self, ch: int | str) -> bool:
        """Tell whether a character (rune or string) separates words."""
        if isinstance(ch, int):
            if ch == 0:
                return False
            ch = chr(ch)
        if not ch:
            return False
        return ch in self.worddelimiters