"""Core of a simple terminal emulator: escape sequences, screen model, selection and sixel."""

__version__ = "0.8.4"

__all__ = ["config", "glyph", "hls", "screen", "selection", "sixel", "terminal", "utf8"]