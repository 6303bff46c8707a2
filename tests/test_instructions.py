"""
Tests for the instruction set and register tables.
"""

import pytest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from nibble_asm.instructions import (
    INSTRUCTIONS,
    Opcode,
    OperandType,
    describe_rule,
    get_all_mnemonics,
    get_instruction,
    is_valid_instruction,
    parse_opcode,
)
from nibble_asm.registers import Register, get_register_name, is_valid_register, parse_register


class TestOpcodes:
    """Tests for opcode encodings and lookup."""

    def test_encodings(self):
        """Test the full opcode encoding table."""
        expected = {
            "nop": 0, "add": 1, "ldi": 2, "sub": 3, "and": 5, "or": 6, "inv": 7,
            "xor": 8, "sr": 9, "sl": 10, "in": 11, "out": 12, "jz": 13, "jlt": 14, "j": 15,
        }
        assert {op.value: op.encode() for op in Opcode} == expected

    def test_encoding_four_is_reserved(self):
        assert 4 not in {op.encode() for op in Opcode}

    def test_encodings_are_unique(self):
        encodings = [op.encode() for op in Opcode]
        assert len(encodings) == len(set(encodings)) == 15

    def test_parse_opcode_case_insensitive(self):
        assert parse_opcode("ADD") == Opcode.ADD
        assert parse_opcode("Jlt") == Opcode.JLT

    def test_parse_opcode_unknown(self):
        assert parse_opcode("mov") is None
        assert not is_valid_instruction("mov")

    def test_every_opcode_has_rules(self):
        assert set(INSTRUCTIONS) == set(Opcode)
        assert sorted(get_all_mnemonics()) == sorted(op.value for op in Opcode)


class TestOperandRules:
    """Tests for the per-opcode operand rules."""

    @pytest.mark.parametrize("opcode", [
        Opcode.ADD, Opcode.SUB, Opcode.AND, Opcode.OR, Opcode.XOR, Opcode.SR, Opcode.SL,
    ])
    def test_register_register(self, opcode):
        rules = get_instruction(opcode).operands
        assert rules == ((OperandType.REGISTER,), (OperandType.REGISTER,))

    def test_nop_has_no_operands(self):
        assert get_instruction(Opcode.NOP).arity == 0

    def test_inv_single_register(self):
        assert get_instruction(Opcode.INV).operands == ((OperandType.REGISTER,),)

    @pytest.mark.parametrize("opcode", [Opcode.LDI, Opcode.IN, Opcode.OUT])
    def test_register_integer(self, opcode):
        rules = get_instruction(opcode).operands
        assert rules == ((OperandType.REGISTER,), (OperandType.INTEGER,))

    @pytest.mark.parametrize("opcode", [Opcode.JZ, Opcode.JLT])
    def test_conditional_jumps(self, opcode):
        rules = get_instruction(opcode).operands
        assert rules == (
            (OperandType.REGISTER,),
            (OperandType.INTEGER, OperandType.LABEL),
        )

    def test_unconditional_jump(self):
        rules = get_instruction(Opcode.J).operands
        assert rules == ((OperandType.INTEGER, OperandType.LABEL),)

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            INSTRUCTIONS[Opcode.NOP] = None

    def test_describe_rule(self):
        assert describe_rule((OperandType.REGISTER,)) == "register"
        assert describe_rule((OperandType.INTEGER, OperandType.LABEL)) == "integer or label"
        assert describe_rule(tuple(OperandType)) == "register, integer or label"


class TestRegisters:
    """Tests for register parsing."""

    def test_all_registers(self):
        for i in range(16):
            register = parse_register(f"r{i}")
            assert register.encode() == i
            assert get_register_name(register) == f"r{i}"

    def test_case_insensitive(self):
        assert parse_register("R15") == Register.R15

    @pytest.mark.parametrize("name", ["r16", "x1", "r", "r-1", "r01"])
    def test_invalid(self, name):
        assert not is_valid_register(name)
        with pytest.raises(ValueError, match="Invalid register name"):
            parse_register(name)
