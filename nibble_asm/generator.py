"""
Machine code generator.

Encodes the parser's items into 2-byte instructions:

    byte 0: [opcode(4) | register(4)]
    byte 1: [data(8)]  (immediate, jump destination, or port/register in the high nibble)

Generation runs in two passes. Pass 1 lays out the program, giving every
label the address (instruction slot) of the instruction that follows it and
enforcing the instruction limit. Pass 2 encodes each instruction, which is
only possible once every label has an address.
"""

from typing import List, Optional

from .errors import (
    DanglingLabelError,
    InternalAssemblerError,
    JumpDestinationRangeError,
    MaximumInstructionsError,
    SourceOrSinkRangeError,
    UndefinedLabelError,
)
from .instructions import CONDITIONAL_JUMP_OPCODES, IO_OPCODES, REGISTER_REGISTER_OPCODES, Opcode
from .labels import LabelTable
from .nodes import Instruction, IntegerOperand, Item, LabelItem, LabelOperand, Operand, RegisterOperand
from .registers import Register

INSTRUCTION_MEMORY_SIZE_BYTES = 64
INSTRUCTION_SIZE_BYTES = 2
MAX_NUM_INSTRUCTIONS = INSTRUCTION_MEMORY_SIZE_BYTES // INSTRUCTION_SIZE_BYTES

# Largest source/sink number that fits in the 4-bit port field
MAX_PORT = 0b1111


def encode_immediate(opcode: Opcode, register: Register, value: int) -> bytes:
    """
    Encode `op register, value` with an 8-bit data byte.

    Negative values are stored in two's complement.
    """
    return bytes([(opcode.encode() << 4) | register.encode(), value & 0xFF])


def encode_no_operand(opcode: Opcode) -> bytes:
    """Encode an instruction whose register and data fields are ignored."""
    return encode_immediate(opcode, Register.R0, 0)


def encode_single_register(opcode: Opcode, register: Register) -> bytes:
    """Encode an instruction with one register and an ignored data byte."""
    return encode_immediate(opcode, register, 0)


def encode_double_register(opcode: Opcode, register1: Register, register2: Register) -> bytes:
    """Encode `op rd, rs`; rs goes in the high nibble of the second byte."""
    return bytes([(opcode.encode() << 4) | register1.encode(), register2.encode() << 4])


def encode_io(opcode: Opcode, register: Register, port: int) -> bytes:
    """
    Encode `in`/`out`; the port goes in the high nibble of the second byte.

    Raises:
        ValueError: If the port does not fit in 4 bits
    """
    if not 0 <= port <= MAX_PORT:
        raise ValueError(f"Port {port} out of range [0, {MAX_PORT}]")
    return encode_immediate(opcode, register, port << 4)


class Generator:
    """
    Two-pass code generator.

    Pass 1: Assign label addresses and count instructions
    Pass 2: Encode instructions with resolved labels
    """

    def __init__(self, items: List[Item], labels: LabelTable):
        self.items = items
        self.labels = labels

    def generate(self) -> bytes:
        """
        Run both passes.

        Returns:
            Encoded instructions, 2 bytes each, without padding
        """
        self.layout()
        return self.encode()

    def layout(self) -> int:
        """Pass 1. Returns the number of instructions."""
        counter = 0
        ended_on_label: Optional[int] = None

        for item in self.items:
            if isinstance(item, LabelItem):
                ended_on_label = item.label_id
                self.labels.set_value(item.label_id, counter)
            elif isinstance(item, Instruction):
                ended_on_label = None
                counter += 1
                if counter > MAX_NUM_INSTRUCTIONS:
                    raise MaximumInstructionsError(MAX_NUM_INSTRUCTIONS, item.span)
            else:
                raise InternalAssemblerError(f"Unknown item: {item!r}")

        # A trailing label has no instruction to point at
        if ended_on_label is not None:
            raise DanglingLabelError(
                self.labels.get_name(ended_on_label),
                self.labels.get_span(ended_on_label),
            )

        return counter

    def encode(self) -> bytes:
        """Pass 2."""
        output = bytearray()
        for item in self.items:
            if isinstance(item, Instruction):
                output += self.encode_instruction(item)
        return bytes(output)

    def encode_instruction(self, instruction: Instruction) -> bytes:
        """
        Encode a single instruction. Labels must already be laid out.

        Raises:
            GeneratorError: For undefined labels and out-of-range values
            InternalAssemblerError: For operand shapes the parser never produces
        """
        opcode = instruction.opcode
        operands = instruction.operands

        if instruction.arity == 0:
            if opcode != Opcode.NOP:
                self._fault(instruction)
            return encode_no_operand(opcode)

        if instruction.arity == 1:
            operand = operands[0]
            if opcode == Opcode.INV and isinstance(operand, RegisterOperand):
                return encode_single_register(opcode, operand.value)
            if opcode == Opcode.J and isinstance(operand, (IntegerOperand, LabelOperand)):
                # The register field is never looked at
                return encode_immediate(opcode, Register.R0, self._resolve(operand))
            self._fault(instruction)

        if instruction.arity == 2:
            first, second = operands
            if not isinstance(first, RegisterOperand):
                self._fault(instruction)

            if opcode in REGISTER_REGISTER_OPCODES and isinstance(second, RegisterOperand):
                return encode_double_register(opcode, first.value, second.value)

            if opcode in CONDITIONAL_JUMP_OPCODES:
                if isinstance(second, LabelOperand):
                    return encode_immediate(opcode, first.value, self._resolve(second))
                if isinstance(second, IntegerOperand):
                    if not second.value < MAX_NUM_INSTRUCTIONS:
                        raise JumpDestinationRangeError(
                            second.value, MAX_NUM_INSTRUCTIONS, second.span
                        )
                    return encode_immediate(opcode, first.value, second.value)

            if opcode == Opcode.LDI and isinstance(second, IntegerOperand):
                return encode_immediate(opcode, first.value, second.value)

            if opcode in IO_OPCODES and isinstance(second, IntegerOperand):
                try:
                    return encode_io(opcode, first.value, second.value)
                except ValueError:
                    raise SourceOrSinkRangeError(second.value, MAX_PORT, second.span)

        self._fault(instruction)

    def _resolve(self, operand: Operand) -> int:
        """Value of an integer operand, or address of a referenced label."""
        if isinstance(operand, IntegerOperand):
            return operand.value
        value = self.labels.get_value(operand.label_id)
        if value is None:
            raise UndefinedLabelError(self.labels.get_name(operand.label_id), operand.span)
        return value

    @staticmethod
    def _fault(instruction: Instruction) -> None:
        raise InternalAssemblerError(f"Cannot encode {instruction!r}")


def generate(items: List[Item], labels: LabelTable) -> bytes:
    """Generate machine code for parsed items. See Generator."""
    return Generator(items, labels).generate()
