"""
Nibble Assembler - An assembler for a minimal 4-bit opcode machine.

The target has sixteen registers, fifteen opcodes, 2-byte instructions and a
64-byte instruction memory. This package translates assembly source into that
64-byte image.
"""

from .assembler import Assembler, assemble
from .config import AssemblerConfig, ConfigError
from .diagnostics import Diagnostic, error_into_diagnostic, render_diagnostic
from .errors import AssemblerError, GeneratorError, InternalAssemblerError, ParseError

__version__ = "1.0.0"
__all__ = [
    "Assembler",
    "AssemblerConfig",
    "AssemblerError",
    "ConfigError",
    "Diagnostic",
    "GeneratorError",
    "InternalAssemblerError",
    "ParseError",
    "assemble",
    "error_into_diagnostic",
    "render_diagnostic",
]
