"""
Tests for diagnostic rendering.
"""

import io
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest

from nibble_asm.assembler import Assembler
from nibble_asm.diagnostics import (
    Diagnostic,
    DiagnosticKind,
    TerminalEmitter,
    error_into_diagnostic,
    render_diagnostic,
)
from nibble_asm.errors import AssemblerError, MaximumInstructionsError, MissingTokenError
from nibble_asm.lexer import TokenType
from nibble_asm.sources import SourceIndex, Span


def first_error(source, file_name="prog.asm"):
    asm = Assembler()
    with pytest.raises(AssemblerError) as info:
        asm.assemble_string(source, file_name=file_name)
    return asm, info.value


class TestErrorIntoDiagnostic:

    def test_carries_label_and_span(self):
        _, error = first_error("a: nop\na: nop")
        diagnostic = error_into_diagnostic(error)
        assert diagnostic == Diagnostic(DiagnosticKind.ERROR, "Duplicate label `a:`", Span(7, 2))

    def test_without_span(self):
        diagnostic = error_into_diagnostic(MissingTokenError(TokenType.COMMA))
        assert diagnostic.span is None
        assert diagnostic.label == "Expected `comma`, found the end of file"

    def test_error_to_diagnostic(self):
        """Errors convert themselves; the free function delegates to them."""
        _, error = first_error("nop\nj missing")
        diagnostic = error.to_diagnostic()
        assert diagnostic == Diagnostic.error("Label `missing` is undefined", Span(6, 7))
        assert error_into_diagnostic(error) == diagnostic

    def test_base_error_to_diagnostic(self):
        diagnostic = AssemblerError("plain", Span(1, 2)).to_diagnostic()
        assert diagnostic.kind is DiagnosticKind.ERROR
        assert diagnostic.label == "plain"
        assert diagnostic.span == Span(1, 2)


class TestRenderDiagnostic:

    def test_duplicate_label(self):
        """Test the full rendering of a diagnostic with a span."""
        asm, error = first_error("a: nop\na: nop")
        assert asm.render_error(error) == "\n".join([
            "error: Duplicate label `a:`",
            "   --> prog.asm:2:1",
            " 2 | a: nop",
            "     ^^",
        ])

    def test_caret_under_column(self):
        asm, error = first_error("ldi r0, 200")
        rendered = asm.render_error(error).splitlines()
        assert rendered[1] == "   --> prog.asm:1:9"
        assert rendered[2] == " 1 | ldi r0, 200"
        assert rendered[3] == "             ^^^"
        assert rendered[3].index("^") == rendered[2].index("200")

    def test_tabs_are_expanded(self):
        asm, error = first_error("\tadd r1 r2")
        rendered = asm.render_error(error).splitlines()
        assert rendered[2] == " 1 |     add r1 r2"
        assert rendered[3].index("^") == rendered[2].index("r2")
        assert rendered[3].count("^") == 2

    def test_gutter_widens_with_line_number(self):
        source = "nop\n" * 11 + "j nowhere"
        asm, error = first_error(source)
        rendered = asm.render_error(error).splitlines()
        assert rendered[0] == "error: Label `nowhere` is undefined"
        assert rendered[1] == "    --> prog.asm:12:3"
        assert rendered[2] == " 12 | j nowhere"
        assert rendered[3] == "        ^^^^^^^"

    def test_maximum_instructions_points_at_extra_instruction(self):
        asm, error = first_error("nop\n" * 33)
        assert isinstance(error, MaximumInstructionsError)
        rendered = asm.render_error(error).splitlines()
        assert rendered[0] == "error: Maximum number of instructions reached (32)"
        assert rendered[1].endswith("prog.asm:33:1")

    def test_without_span_only_prints_label(self):
        diagnostic = Diagnostic.error("Something went wrong")
        assert render_diagnostic(diagnostic, SourceIndex("nop")) == "error: Something went wrong"

    def test_zero_length_span_gets_one_caret(self):
        diagnostic = Diagnostic.error("here", Span(3, 0))
        rendered = render_diagnostic(diagnostic, SourceIndex("nop"))
        assert rendered.splitlines()[3] == "        ^"


class TestTerminalEmitter:

    def test_emit_writes_to_stream(self):
        stream = io.StringIO()
        emitter = TerminalEmitter(SourceIndex("nop", "x.asm"), stream=stream)
        emitter.emit(Diagnostic.error("bad", Span(0, 3)))
        assert stream.getvalue() == "error: bad\n   --> x.asm:1:1\n 1 | nop\n     ^^^\n"

    def test_emit_defaults_to_stderr(self, capsys):
        emitter = TerminalEmitter(SourceIndex("nop", "x.asm"))
        emitter.emit(Diagnostic.error("bad"))
        assert capsys.readouterr().err == "error: bad\n"
