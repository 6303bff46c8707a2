#!/usr/bin/env python3
"""
Nibble Assembler - Command Line Interface

Usage:
    python3 -m nibble_asm input.asm
    python3 -m nibble_asm input.asm -o output.bin --hexdump
    python3 -m nibble_asm input.asm --listing -v
"""

import argparse
import sys
from pathlib import Path

from . import __version__
from .assembler import Assembler
from .config import AssemblerConfig, ConfigError, load_config, validate_config
from .diagnostics import TerminalEmitter
from .errors import AssemblerError


def derive_output_path(input_path: Path) -> Path:
    """Binary image path for an input file: same name, `.bin` suffix."""
    return input_path.with_suffix(".bin")


def derive_hexdump_path(output_path: Path) -> Path:
    """Hex dump path for a binary image: same name, `.hex` suffix."""
    return output_path.with_suffix(".hex")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nibble-asm",
        description="Nibble 4-bit opcode machine assembler",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s programs/count.asm
  %(prog)s programs/count.asm -o build/count.bin --hexdump
  %(prog)s programs/count.asm --listing
        """,
    )

    parser.add_argument(
        "input",
        type=str,
        help="Input assembly file",
    )

    parser.add_argument(
        "-o",
        "--output",
        type=str,
        help="Output binary file. Defaults to the input path with a .bin suffix.",
    )

    parser.add_argument(
        "--hexdump",
        action="store_true",
        default=None,
        help="Also write a hex dump of the image (.hex next to the output)",
    )

    parser.add_argument(
        "--hexdump-width",
        type=int,
        help="Bytes per hex dump row",
    )

    parser.add_argument(
        "-l",
        "--listing",
        action="store_true",
        help="Print assembly listing",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=str,
        help="YAML configuration file",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=None,
        help="Enable verbose output",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config) if args.config else AssemblerConfig()
        config = validate_config(
            config.override(
                hexdump=args.hexdump,
                hexdump_width=args.hexdump_width,
                verbose=args.verbose,
            )
        )
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # Validate input file
    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        return 1

    output_path = Path(args.output) if args.output else derive_output_path(input_path)
    if output_path.resolve() == input_path.resolve():
        print(f"Error: Output would overwrite the input file: {args.input}", file=sys.stderr)
        return 1

    asm = Assembler(config)
    try:
        asm.assemble_file(str(input_path))
    except AssemblerError as e:
        TerminalEmitter(asm.sources, tab_width=config.tab_width).emit(asm.diagnose(e))
        return 1
    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        if config.verbose:
            import traceback

            traceback.print_exc()
        return 1

    try:
        asm.write_binary(str(output_path))
        if config.hexdump:
            hexdump_path = derive_hexdump_path(output_path)
            asm.write_hexdump(str(hexdump_path))
            asm.log(f"Hex dump written to: {hexdump_path}")
    except OSError as e:
        print(f"Error: cannot write output: {e}", file=sys.stderr)
        return 1

    # Print listing if requested
    if args.listing:
        print("\n" + asm.get_listing())

    print(f"Assembly successful: {len(asm.instructions)} instructions -> {output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
