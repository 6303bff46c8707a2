"""
Register definitions and name mappings.

The machine has sixteen general-purpose registers, written r0-r15 in source
(case-insensitive).
"""

from enum import Enum


class Register(Enum):
    """General-purpose register; the value is its 4-bit encoding."""

    R0 = 0
    R1 = 1
    R2 = 2
    R3 = 3
    R4 = 4
    R5 = 5
    R6 = 6
    R7 = 7
    R8 = 8
    R9 = 9
    R10 = 10
    R11 = 11
    R12 = 12
    R13 = 13
    R14 = 14
    R15 = 15

    def encode(self) -> int:
        return self.value


# Build the name to register mapping (r0-r15)
REGISTER_MAP = {}

for _register in Register:
    REGISTER_MAP[f"r{_register.value}"] = _register


def parse_register(name: str) -> Register:
    """
    Parse a register name.

    Args:
        name: Register name (e.g., "r0", "R15")

    Returns:
        The matching Register

    Raises:
        ValueError: If the register name is invalid
    """
    name_lower = name.lower()
    if name_lower in REGISTER_MAP:
        return REGISTER_MAP[name_lower]
    raise ValueError(f"Invalid register name: {name}")


def is_valid_register(name: str) -> bool:
    """Check if a string is a valid register name."""
    return name.lower() in REGISTER_MAP


def get_register_name(register: Register) -> str:
    """Get the canonical source spelling of a register."""
    return f"r{register.value}"
