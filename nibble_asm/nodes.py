"""
Parser output: operands, instructions and the items that sequence them.
"""

from dataclasses import dataclass
from typing import Tuple, Union

from .instructions import Opcode
from .registers import Register
from .sources import Span


@dataclass(frozen=True)
class RegisterOperand:
    value: Register
    span: Span


@dataclass(frozen=True)
class IntegerOperand:
    """Immediate operand; value is a signed 8-bit integer."""

    value: int
    span: Span


@dataclass(frozen=True)
class LabelOperand:
    """Reference to a label by its id in the label table."""

    label_id: int
    span: Span


Operand = Union[RegisterOperand, IntegerOperand, LabelOperand]


@dataclass(frozen=True)
class Instruction:
    """
    A single parsed instruction.

    Attributes:
        opcode: Instruction opcode
        operands: Zero, one or two operands, as dictated by the opcode's rules
        span: Location of the mnemonic
    """

    opcode: Opcode
    operands: Tuple[Operand, ...]
    span: Span

    @property
    def arity(self) -> int:
        return len(self.operands)


@dataclass(frozen=True)
class LabelItem:
    """Marks the position of a label definition in the item sequence."""

    label_id: int


Item = Union[LabelItem, Instruction]
