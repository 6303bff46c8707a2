"""
Instruction set definitions.

This module defines all fifteen opcodes with their 4-bit encodings and the
operand rules the parser enforces for each of them. Encodings are listed by
hand rather than derived from declaration order: value 4 is reserved and must
stay unused.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Optional, Tuple


class Opcode(Enum):
    """Mnemonics understood by the assembler."""

    NOP = "nop"
    ADD = "add"
    LDI = "ldi"
    SUB = "sub"
    AND = "and"
    OR = "or"
    INV = "inv"
    XOR = "xor"
    SR = "sr"
    SL = "sl"
    IN = "in"
    OUT = "out"
    JZ = "jz"
    JLT = "jlt"
    J = "j"

    def encode(self) -> int:
        return INSTRUCTIONS[self].encoding


class OperandType(Enum):
    """Kinds of value an operand position can accept."""

    REGISTER = "register"
    INTEGER = "integer"
    LABEL = "label"


# Accepted kinds for a single operand position, in the order they are tried
OperandRule = Tuple[OperandType, ...]


@dataclass(frozen=True)
class InstructionDef:
    """
    Definition of an instruction.

    Attributes:
        encoding: 4-bit opcode placed in the high nibble of the first byte
        operands: One rule per operand position (empty for no operands)
    """

    encoding: int
    operands: Tuple[OperandRule, ...]

    @property
    def arity(self) -> int:
        return len(self.operands)


_REG: OperandRule = (OperandType.REGISTER,)
_INT: OperandRule = (OperandType.INTEGER,)
_TARGET: OperandRule = (OperandType.INTEGER, OperandType.LABEL)


INSTRUCTIONS = MappingProxyType({
    # -------------------------------------------------------------------------
    # No operation
    # -------------------------------------------------------------------------
    Opcode.NOP: InstructionDef(encoding=0x0, operands=()),
    # -------------------------------------------------------------------------
    # Register-register ALU operations
    # -------------------------------------------------------------------------
    Opcode.ADD: InstructionDef(encoding=0x1, operands=(_REG, _REG)),
    Opcode.SUB: InstructionDef(encoding=0x3, operands=(_REG, _REG)),
    Opcode.AND: InstructionDef(encoding=0x5, operands=(_REG, _REG)),
    Opcode.OR: InstructionDef(encoding=0x6, operands=(_REG, _REG)),
    Opcode.XOR: InstructionDef(encoding=0x8, operands=(_REG, _REG)),
    Opcode.SR: InstructionDef(encoding=0x9, operands=(_REG, _REG)),
    Opcode.SL: InstructionDef(encoding=0xA, operands=(_REG, _REG)),
    # -------------------------------------------------------------------------
    # Immediate load and single-register operations
    # -------------------------------------------------------------------------
    Opcode.LDI: InstructionDef(encoding=0x2, operands=(_REG, _INT)),
    Opcode.INV: InstructionDef(encoding=0x7, operands=(_REG,)),
    # -------------------------------------------------------------------------
    # I/O (second operand is a 4-bit source or sink number)
    # -------------------------------------------------------------------------
    Opcode.IN: InstructionDef(encoding=0xB, operands=(_REG, _INT)),
    Opcode.OUT: InstructionDef(encoding=0xC, operands=(_REG, _INT)),
    # -------------------------------------------------------------------------
    # Jumps (destination is an instruction slot or a label)
    # -------------------------------------------------------------------------
    Opcode.JZ: InstructionDef(encoding=0xD, operands=(_REG, _TARGET)),
    Opcode.JLT: InstructionDef(encoding=0xE, operands=(_REG, _TARGET)),
    Opcode.J: InstructionDef(encoding=0xF, operands=(_TARGET,)),
})

# Opcodes encoded as `op rd, rs`
REGISTER_REGISTER_OPCODES = frozenset({
    Opcode.ADD, Opcode.SUB, Opcode.AND, Opcode.OR, Opcode.XOR, Opcode.SR, Opcode.SL,
})

CONDITIONAL_JUMP_OPCODES = frozenset({Opcode.JZ, Opcode.JLT})

IO_OPCODES = frozenset({Opcode.IN, Opcode.OUT})


def parse_opcode(mnemonic: str) -> Optional[Opcode]:
    """
    Look up an opcode by mnemonic.

    Args:
        mnemonic: Instruction mnemonic (case-insensitive)

    Returns:
        Opcode if found, None otherwise
    """
    try:
        return Opcode(mnemonic.lower())
    except ValueError:
        return None


def get_instruction(opcode: Opcode) -> InstructionDef:
    """Look up the definition of an opcode."""
    return INSTRUCTIONS[opcode]


def is_valid_instruction(mnemonic: str) -> bool:
    """Check if a mnemonic is a valid instruction."""
    return parse_opcode(mnemonic) is not None


def describe_rule(rule: OperandRule) -> str:
    """
    Describe the accepted kinds of an operand position.

    Example:
        >>> describe_rule((OperandType.INTEGER, OperandType.LABEL))
        'integer or label'
    """
    names = [operand_type.value for operand_type in rule]
    if len(names) == 1:
        return names[0]
    return ", ".join(names[:-1]) + " or " + names[-1]


def get_all_mnemonics() -> list:
    """Get a list of all supported instruction mnemonics."""
    return [opcode.value for opcode in INSTRUCTIONS]
