"""
Diagnostic rendering.

Converts assembler errors into diagnostics and renders them the way a
compiler does:

    error: Duplicate label `loop:`
       --> prog.asm:3:1
     3 | loop: nop
         ^^^^^
"""

import sys
from dataclasses import dataclass
from enum import Enum
from typing import Optional, TextIO

from .errors import AssemblerError
from .sources import SourceIndex, Span


class DiagnosticKind(Enum):
    ERROR = "error"


@dataclass(frozen=True)
class Diagnostic:
    """
    A single message for the user.

    Attributes:
        kind: Severity of the diagnostic
        label: Message text
        span: Source location the message points at, if any
    """

    kind: DiagnosticKind
    label: str
    span: Optional[Span] = None

    @classmethod
    def error(cls, label: str, span: Optional[Span] = None) -> "Diagnostic":
        return cls(DiagnosticKind.ERROR, label, span)


def error_into_diagnostic(error: AssemblerError) -> Diagnostic:
    """Convert an assembler error into an error diagnostic."""
    return error.to_diagnostic()


def render_diagnostic(
    diagnostic: Diagnostic, sources: SourceIndex, tab_width: int = 4
) -> str:
    """
    Render a diagnostic as text.

    Args:
        diagnostic: Diagnostic to render
        sources: Index over the source the diagnostic refers to
        tab_width: Number of spaces a tab renders as

    Returns:
        Rendered text, without a trailing newline
    """
    lines = [f"{diagnostic.kind.value}: {diagnostic.label}"]

    if diagnostic.span is not None:
        line, line_number, column = sources.get_span_line(diagnostic.span, tab_width)
        padding = " " * len(str(line_number))

        lines.append(f" {padding} --> {sources.file_name}:{line_number}:{column}")
        lines.append(f" {line_number} | {line}")
        # Gutter is " N | ", i.e. the padding plus four characters
        pointer = padding + " " * (column - 1 + 4) + "^" * max(1, diagnostic.span.length)
        lines.append(pointer)

    return "\n".join(lines)


class TerminalEmitter:
    """Writes rendered diagnostics to a stream (stderr by default)."""

    def __init__(self, sources: SourceIndex, stream: Optional[TextIO] = None, tab_width: int = 4):
        self.sources = sources
        self.stream = stream
        self.tab_width = tab_width

    def emit(self, diagnostic: Diagnostic) -> None:
        stream = self.stream if self.stream is not None else sys.stderr
        print(render_diagnostic(diagnostic, self.sources, self.tab_width), file=stream)
