"""
Custom exception types for the nibble assembler.

Every user-facing failure is an AssemblerError subclass carrying the span it
refers to (when there is one), so it can be rendered as a diagnostic with a
source excerpt. Parse-time and generation-time failures form two families;
internal faults are kept apart on purpose and never subclass AssemblerError.
"""

from typing import Optional

from .sources import Span


def _shown(text: str) -> str:
    """Make control characters visible inside a one-line message."""
    return text.replace("\r", "\\r").replace("\n", "\\n")


class AssemblerError(Exception):
    """Base exception for assembler errors."""

    def __init__(self, message: str, span: Optional[Span] = None):
        self.span = span
        super().__init__(message)

    @property
    def label(self) -> str:
        """Human-readable message without location information."""
        return self.args[0]

    def to_diagnostic(self):
        """Convert this error into an error `Diagnostic`."""
        from .diagnostics import Diagnostic

        return Diagnostic.error(self.label, self.span)


class InternalAssemblerError(Exception):
    """
    Raised when the parser hands the generator something it cannot encode.

    This indicates a bug in the assembler itself, not in the user's program.
    """

    def __init__(self, message: str):
        super().__init__(f"Internal Assembler Error: {message}")


# =============================================================================
# Parse errors (lexical filtering, syntax and static semantics)
# =============================================================================


class ParseError(AssemblerError):
    """Exception raised for lexing and parsing errors."""

    def __init__(self, message: str, token=None):
        self.token = token
        super().__init__(message, token.span if token is not None else None)


class InvalidTokenError(ParseError):
    def __init__(self, token, text: str):
        self.text = text
        super().__init__(f"Invalid token found `{_shown(text)}`", token)


class InvalidIntegerError(ParseError):
    def __init__(self, token, text: str):
        self.text = text
        super().__init__(f"Invalid integer value `{text}`", token)


class UnexpectedTokenError(ParseError):
    def __init__(self, expected, token, text: str):
        self.expected = expected
        self.text = text
        super().__init__(f"Expected `{expected.value}`, found `{_shown(text)}`", token)


class MissingTokenError(ParseError):
    def __init__(self, expected):
        self.expected = expected
        super().__init__(f"Expected `{expected.value}`, found the end of file")


class InvalidInstructionError(ParseError):
    def __init__(self, token, text: str):
        self.text = text
        super().__init__(f"`{text}` is not a valid instruction", token)


class ExpectedInstructionBeforeLabelError(ParseError):
    def __init__(self, token, text: str):
        self.text = text
        super().__init__(
            f"Expected instruction after label, found second label `{text}`", token
        )


class DuplicateLabelError(ParseError):
    def __init__(self, token, text: str):
        self.text = text
        super().__init__(f"Duplicate label `{text}`", token)


class ExpectedInstructionError(ParseError):
    def __init__(self, token, text: str):
        self.text = text
        super().__init__(f"Expected an instruction, found `{_shown(text)}`", token)


class ExpectedNoOperandsError(ParseError):
    def __init__(self, token, text: str):
        self.text = text
        super().__init__(f"Instruction takes no operands, found `{_shown(text)}`", token)


class ExpectedOperandFoundEOFError(ParseError):
    """Raised with the instruction's mnemonic token, since no operand token exists."""

    def __init__(self, token, text: str):
        self.text = text
        super().__init__(
            f"Expected instruction operand for `{text}`, found end of file", token
        )


class ExpectedOperandError(ParseError):
    def __init__(self, token, text: str, expected: str):
        self.text = text
        self.expected = expected
        super().__init__(
            f"Expected instruction operand (one of {expected}), found `{_shown(text)}`",
            token,
        )


class ExpectedRegisterError(ParseError):
    def __init__(self, token, text: str):
        self.text = text
        super().__init__(
            f"Expected register for instruction operand, found `{text}`", token
        )


class IntegerOutOfRangeError(ParseError):
    def __init__(self, token, text: str):
        self.text = text
        super().__init__(
            f"Value `{text}` is out of range for an 8-bit signed integer value", token
        )


# =============================================================================
# Generator errors (layout and encoding semantics)
# =============================================================================


class GeneratorError(AssemblerError):
    """Exception raised for layout and encoding errors."""

    pass


class MaximumInstructionsError(GeneratorError):
    def __init__(self, limit: int, span: Optional[Span] = None):
        self.limit = limit
        super().__init__(f"Maximum number of instructions reached ({limit})", span)


class DanglingLabelError(GeneratorError):
    def __init__(self, name: str, span: Optional[Span]):
        self.name = name
        super().__init__(f"Dangling label `{name}`", span)


class UndefinedLabelError(GeneratorError):
    def __init__(self, name: str, span: Span):
        self.name = name
        super().__init__(f"Label `{name}` is undefined", span)


class JumpDestinationRangeError(GeneratorError):
    def __init__(self, value: int, limit: int, span: Span):
        self.value = value
        self.limit = limit
        super().__init__(
            f"Jump destination must be in the range of 0-{limit - 1}, found `{value}`",
            span,
        )


class SourceOrSinkRangeError(GeneratorError):
    def __init__(self, value: int, limit: int, span: Span):
        self.value = value
        self.limit = limit
        super().__init__(
            f"Source or sink must be in the range of 0-{limit}, found `{value}`", span
        )
