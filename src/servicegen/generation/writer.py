"""Line-oriented writer for generated Python source."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager


class CodeWriter:
    """Accumulates indented lines of generated code.

    Blocks are context managers, so indentation always unwinds and a Python
    block that received no statements gets a ``pass``. ``blank()`` collapses
    repeated blank lines and is skipped right after a block opens, which lets
    emitters separate members without tracking whether they are first.

    Example:
        >>> code = CodeWriter()
        >>> with code.block("class Empty:"):
        ...     code.blank()
        >>> code.lines()
        ['class Empty:', '    pass']
    """

    def __init__(self, indent: str = "    ") -> None:
        self._indent = indent
        self._level = 0
        self._lines: list[str] = []
        self._skip_blank = True

    def line(self, text: str = "") -> None:
        """Write one line (or several, split on newlines) at the current indentation."""
        if not text:
            self._lines.append("")
            return
        for part in text.split("\n"):
            self._lines.append(self._indent * self._level + part if part else "")
        self._skip_blank = False

    def blank(self, count: int = 1) -> None:
        """Write up to ``count`` blank lines unless a block has just opened."""
        if self._skip_blank:
            return
        trailing = 0
        for existing in reversed(self._lines):
            if existing:
                break
            trailing += 1
        for _ in range(count - trailing):
            self._lines.append("")

    @contextmanager
    def indent(self) -> Iterator[None]:
        self._level += 1
        try:
            yield
        finally:
            self._level -= 1

    @contextmanager
    def block(self, header: str, footer: str | None = None) -> Iterator[None]:
        """Write ``header``, indent the body and close it.

        With a ``footer`` (e.g. ``"}"`` for a literal) the footer closes the
        block; without one the block is a Python suite and gets ``pass`` if
        nothing was written inside.
        """
        self.line(header)
        start = len(self._lines)
        self._level += 1
        self._skip_blank = True
        try:
            yield
        finally:
            if footer is None and not any(self._lines[start:]):
                self.line("pass")
            self._level -= 1
            self._skip_blank = False
        if footer is not None:
            self.line(footer)

    def extend(self, lines: list[str]) -> None:
        """Write pre-rendered lines, re-indented to the current level."""
        for text in lines:
            self.line(text)

    def lines(self) -> list[str]:
        """Return the written lines without trailing blank lines."""
        result = list(self._lines)
        while result and not result[-1]:
            result.pop()
        return result
