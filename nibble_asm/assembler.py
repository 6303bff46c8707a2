"""
Main assembler implementation.

Runs the full pipeline (lex, filter, parse, generate) over one source unit and
pads the result to the fixed 64-byte instruction memory image.
"""

from pathlib import Path
from typing import List, Optional

from .config import AssemblerConfig
from .diagnostics import Diagnostic, error_into_diagnostic, render_diagnostic
from .errors import AssemblerError
from .generator import INSTRUCTION_MEMORY_SIZE_BYTES, INSTRUCTION_SIZE_BYTES, Generator
from .labels import LabelTable
from .lexer import tokenize
from .nodes import Instruction, Item
from .parser import Parser
from .sources import SourceIndex


class Assembler:
    """
    Assembler for the 4-bit opcode machine.

    A single instance can assemble several sources in turn; the results of the
    most recent successful run are kept for listings and output files.
    """

    def __init__(self, config: Optional[AssemblerConfig] = None, verbose: bool = False):
        """
        Initialize the assembler.

        Args:
            config: Assembler options. Uses defaults if None.
            verbose: If True, print detailed assembly information
        """
        self.config = config or AssemblerConfig()
        self.verbose = verbose or self.config.verbose
        self.sources: Optional[SourceIndex] = None
        self.items: List[Item] = []
        self.labels = LabelTable()
        self.code: bytes = b""  # encoded instructions, unpadded
        self.image: bytes = b""  # full instruction memory

    def log(self, message: str) -> None:
        """Print message if verbose mode is enabled."""
        if self.verbose:
            print(message)

    @property
    def instructions(self) -> List[Instruction]:
        return [item for item in self.items if isinstance(item, Instruction)]

    def assemble_string(self, source: str, file_name: str = "<source>") -> bytes:
        """
        Assemble from a string.

        Args:
            source: Assembly source code
            file_name: Name used in diagnostics

        Returns:
            The 64-byte instruction memory image

        Raises:
            AssemblerError: On the first error in the program
        """
        self.sources = SourceIndex(source, file_name)
        self.items = []
        self.labels = LabelTable()
        self.code = b""
        self.image = b""

        tokens = tokenize(self.sources)
        self.log(f"  Tokens: {len(tokens)}")

        self.log("\n=== Parsing ===")
        items, labels = Parser(tokens, self.sources).parse()

        self.log("\n=== Pass 1: Laying out labels ===")
        generator = Generator(items, labels)
        count = generator.layout()
        for record in labels:
            if record.value is not None:
                self.log(f"  Label '{record.name}' at slot {record.value}")
        self.log(f"  Program size: {count} instructions")

        self.log("\n=== Pass 2: Encoding instructions ===")
        code = generator.encode()

        self.items = items
        self.labels = labels
        self.code = code
        self.image = code.ljust(INSTRUCTION_MEMORY_SIZE_BYTES, b"\x00")

        for address, instruction in enumerate(self.instructions):
            offset = address * INSTRUCTION_SIZE_BYTES
            self.log(
                f"  0x{address:02X}: {code[offset]:02X} {code[offset + 1]:02X}  "
                f"{self._source_line(instruction)}"
            )
        self.log(f"\n  Total instructions: {count}")

        return self.image

    def assemble_file(self, input_path: str, output_path: str = None) -> bytes:
        """
        Assemble an assembly file.

        Args:
            input_path: Path to the source file
            output_path: Path to the binary output file (optional)

        Returns:
            The 64-byte instruction memory image
        """
        self.log(f"Assembling: {input_path}")
        source = Path(input_path).read_text(encoding="utf-8")
        image = self.assemble_string(source, file_name=str(input_path))

        if output_path:
            self.write_binary(output_path)
            self.log(f"Output written to: {output_path}")

        return image

    def diagnose(self, error: AssemblerError) -> Diagnostic:
        """Convert an error from the last run into a diagnostic."""
        return error_into_diagnostic(error)

    def render_error(self, error: AssemblerError) -> str:
        """Render an error from the last run with its source excerpt."""
        return render_diagnostic(self.diagnose(error), self.sources, self.config.tab_width)

    def write_binary(self, output_path: str) -> None:
        """Write the instruction memory image."""
        with open(output_path, "wb") as f:
            f.write(self.image)

    def write_hexdump(self, output_path: str) -> None:
        """Write the hex dump of the instruction memory image."""
        with open(output_path, "w") as f:
            f.write(self.get_hex_dump() + "\n")

    def get_hex_dump(self, width: Optional[int] = None) -> str:
        """
        Get the instruction memory image as a hex dump.

        Args:
            width: Bytes per row (defaults to the configured width)

        Returns:
            One row per `width` bytes, e.g. "0000: 11 20 00 00 ..."

        Raises:
            ValueError: If width is not positive
        """
        width = self.config.hexdump_width if width is None else width
        if width < 1:
            raise ValueError(f"Hex dump width must be positive, got {width}")
        rows = []
        for offset in range(0, len(self.image), width):
            chunk = self.image[offset:offset + width]
            rows.append(f"{offset:04X}: " + " ".join(f"{b:02X}" for b in chunk))
        return "\n".join(rows)

    def get_listing(self) -> str:
        """
        Get an assembly listing showing addresses, encodings, and source.

        Returns:
            Formatted listing string
        """
        lines = []
        lines.append("Address  Code   Source")
        lines.append("-" * 60)

        for address, instruction in enumerate(self.instructions):
            offset = address * INSTRUCTION_SIZE_BYTES
            code = self.code[offset:offset + INSTRUCTION_SIZE_BYTES]
            lines.append(
                f"0x{address:02X}:    {code[0]:02X} {code[1]:02X}  "
                f"{self._source_line(instruction)}"
            )

        return "\n".join(lines)

    def _source_line(self, instruction: Instruction) -> str:
        line, _, _ = self.sources.get_span_line(instruction.span, self.config.tab_width)
        return line.strip()


def assemble(source: str) -> bytes:
    """
    Assemble source text into a 64-byte instruction memory image.

    Raises:
        AssemblerError: On the first error; use error_into_diagnostic() to
            turn it into a Diagnostic
    """
    return Assembler().assemble_string(source)
