"""
Source text indexing.

Maps spans back onto the original source text, both as raw substrings and as
(line text, line number, column) triples for diagnostics. Nothing else in the
assembler slices the raw source directly.
"""

from bisect import bisect_right
from dataclasses import dataclass
from typing import List, Tuple


@dataclass(frozen=True)
class Span:
    """
    Half-open character range into the source text.

    Attributes:
        offset: Index of the first character
        length: Number of characters covered
    """

    offset: int
    length: int

    @property
    def end(self) -> int:
        return self.offset + self.length


class SourceIndex:
    """
    Read-only view over one source unit.

    Line starts are computed once so span lookups stay cheap no matter how many
    diagnostics are rendered.
    """

    def __init__(self, source: str, file_name: str = "<source>"):
        """
        Args:
            source: Full assembly source text
            file_name: Name shown in diagnostic locators
        """
        self.source = source
        self.file_name = file_name
        self._line_starts: List[int] = [0]
        for i, char in enumerate(source):
            if char == "\n":
                self._line_starts.append(i + 1)

    def get_span(self, span: Span) -> str:
        """
        Return the text covered by a span.

        Raises:
            ValueError: If the span reaches past the end of the source
        """
        if span.offset < 0 or span.end > len(self.source):
            raise ValueError(
                f"Span {span.offset}+{span.length} is outside of the source "
                f"({len(self.source)} characters)"
            )
        return self.source[span.offset:span.end]

    def get_span_line(self, span: Span, tab_width: int = 4) -> Tuple[str, int, int]:
        """
        Locate the line a span starts on.

        Args:
            span: Span to locate
            tab_width: Number of spaces a tab renders as

        Returns:
            Tuple of (line text with tabs expanded, 1-based line number,
            1-based rendered column)
        """
        if span.offset < 0 or span.offset > len(self.source):
            raise ValueError(f"Span offset {span.offset} is outside of the source")

        line_index = bisect_right(self._line_starts, span.offset) - 1
        line_start = self._line_starts[line_index]
        line_end = self.source.find("\n", line_start)
        if line_end == -1:
            line_end = len(self.source)

        tab = " " * tab_width
        line = self.source[line_start:line_end].rstrip("\r").replace("\t", tab)
        prefix = self.source[line_start:span.offset].replace("\t", tab)

        return line, line_index + 1, len(prefix) + 1

    @property
    def line_count(self) -> int:
        return len(self._line_starts)
