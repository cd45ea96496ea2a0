"""Building text with optional ANSI styling."""

from __future__ import annotations

from typing import Callable

STYLE_DEFAULT = "\x1b[0m"
STYLE_GRAY = "\x1b[90m"
STYLE_RED = "\x1b[91m"
STYLE_YELLOW = "\x1b[93m"
STYLE_CYAN = "\x1b[96m"
STYLE_WHITE = "\x1b[97m"
STYLE_BOLD = "\x1b[1m"


class StringStyler:
    """Accumulates text; style codes are emitted only when colours are on."""

    def __init__(self, use_colors: bool) -> None:
        self.result = ""
        self.use_colors = use_colors

    def add(self, string: str) -> None:
        self.result += string

    def add_char(self, ch: str) -> None:
        self.result += ch

    def addln(self, string: str) -> None:
        self.result += string + "\n"

    def indent(self, amount: int) -> None:
        self.result += " " * amount

    def add_styled(
        self,
        string: str,
        pattern: str,
        fn_start: Callable[[StringStyler], None],
        fn_end: Callable[[StringStyler], None],
    ) -> None:
        """Add ``string``, wrapping each occurrence of ``pattern`` in callbacks."""
        index = 0
        search_from = 0
        while pattern:
            pos = string.find(pattern, search_from)
            if pos < 0:
                break
            search_from = pos + len(pattern)
            if index < pos:
                self.add(string[index:pos])
                index = pos + len(pattern)
            fn_start(self)
            self.add(pattern)
            fn_end(self)

        if index < len(string):
            self.add(string[index:])

    def add_style(self, style: str) -> None:
        if self.use_colors:
            self.add(style)

    def reset(self) -> None:
        self.add_style(STYLE_DEFAULT)

    def gray(self) -> None:
        self.add_style(STYLE_GRAY)

    def white(self) -> None:
        self.add_style(STYLE_WHITE)

    def red(self) -> None:
        self.add_style(STYLE_RED)

    def yellow(self) -> None:
        self.add_style(STYLE_YELLOW)

    def cyan(self) -> None:
        self.add_style(STYLE_CYAN)

    def bold(self) -> None:
        self.add_style(STYLE_BOLD)