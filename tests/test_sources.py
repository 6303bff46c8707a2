"""
Tests for the source index module.
"""

import pytest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from nibble_asm.sources import SourceIndex, Span


class TestGetSpan:
    """Tests for SourceIndex.get_span."""

    def test_substring(self):
        sources = SourceIndex("add r1, r2")
        assert sources.get_span(Span(4, 2)) == "r1"

    def test_span_past_end_raises(self):
        sources = SourceIndex("nop")
        with pytest.raises(ValueError):
            sources.get_span(Span(2, 5))


class TestGetSpanLine:
    """Tests for SourceIndex.get_span_line."""

    def test_first_line(self):
        """Test line and column on the first line."""
        sources = SourceIndex("add r1, r2\nnop")
        assert sources.get_span_line(Span(8, 2)) == ("add r1, r2", 1, 9)

    def test_later_line(self):
        """Test line numbers are 1-based and counted by newlines."""
        sources = SourceIndex("nop\n\nloop: j loop\n")
        assert sources.get_span_line(Span(5, 5)) == ("loop: j loop", 3, 1)

    def test_tabs_expanded(self):
        """Test that tabs are expanded in both the line and the column."""
        sources = SourceIndex("\tadd r1 r2")
        line, line_number, column = sources.get_span_line(Span(8, 2))
        assert line == "    add r1 r2"
        assert line_number == 1
        assert column == 12

    def test_custom_tab_width(self):
        sources = SourceIndex("\tnop")
        assert sources.get_span_line(Span(1, 3), tab_width=8) == ("        nop", 1, 9)

    def test_newline_belongs_to_its_line(self):
        """Test that a newline character is located on the line it ends."""
        sources = SourceIndex("add\nnop")
        assert sources.get_span_line(Span(3, 1)) == ("add", 1, 4)

    def test_carriage_return_stripped(self):
        sources = SourceIndex("nop\r\nadd r1\r\n")
        assert sources.get_span_line(Span(5, 3)) == ("add r1", 2, 1)

    def test_line_count(self):
        assert SourceIndex("a\nb\nc").line_count == 3
