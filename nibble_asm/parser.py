"""
Assembly parser.

Turns the filtered token stream into an ordered list of items (label markers
and instructions) and builds the label table along the way. Each line is
`[label:] [mnemonic [operand [, operand]]]`; the operand rules of the opcode
decide how many operands are read and which kinds they may be.

Parsing stops at the first error; there is no recovery.
"""

from typing import List, Optional, Tuple

from .errors import (
    DuplicateLabelError,
    ExpectedInstructionBeforeLabelError,
    ExpectedInstructionError,
    ExpectedNoOperandsError,
    ExpectedOperandError,
    ExpectedOperandFoundEOFError,
    ExpectedRegisterError,
    IntegerOutOfRangeError,
    InternalAssemblerError,
    InvalidInstructionError,
    MissingTokenError,
    UnexpectedTokenError,
)
from .instructions import OperandRule, OperandType, describe_rule, get_instruction, parse_opcode
from .labels import LabelTable
from .lexer import Token, TokenType
from .nodes import Instruction, IntegerOperand, Item, LabelItem, LabelOperand, Operand, RegisterOperand
from .registers import parse_register
from .sources import SourceIndex

INT8_MIN = -128
INT8_MAX = 127


def parse_integer(text: str) -> int:
    """
    Parse a decimal integer literal into a signed 8-bit value.

    Raises:
        ValueError: If the text is not decimal or does not fit in 8 bits
    """
    if not text.isdecimal():
        raise ValueError(f"Invalid integer literal: {text}")
    value = int(text, 10)
    if not INT8_MIN <= value <= INT8_MAX:
        raise ValueError(f"Integer {value} out of range [{INT8_MIN}, {INT8_MAX}]")
    return value


class Parser:
    """
    Single-use parser over one filtered token stream.

    Usage:
        items, labels = Parser(tokens, sources).parse()
    """

    def __init__(self, tokens: List[Token], sources: SourceIndex):
        """
        Args:
            tokens: Tokens with comments and invalid tokens already removed
            sources: Index over the source the tokens came from
        """
        self.tokens = tokens
        self.sources = sources
        self.position = 0
        self.labels = LabelTable()
        # A label has been defined and no instruction has followed it yet
        self.pending_label = False

    def parse(self) -> Tuple[List[Item], LabelTable]:
        """
        Parse every line.

        Returns:
            Tuple of (items in source order, label table)
        """
        items: List[Item] = []
        while self._peek() is not None:
            items.extend(self._parse_line())
        return items, self.labels

    # -------------------------------------------------------------------------
    # Token stream helpers
    # -------------------------------------------------------------------------

    def _peek(self) -> Optional[Token]:
        if self.position < len(self.tokens):
            return self.tokens[self.position]
        return None

    def _next(self) -> Optional[Token]:
        token = self._peek()
        if token is not None:
            self.position += 1
        return token

    def _peek_is(self, token_type: TokenType) -> bool:
        token = self._peek()
        return token is not None and token.type == token_type

    def _at_line_end(self) -> bool:
        return self._peek() is None or self._peek_is(TokenType.NEWLINE)

    def _text(self, token: Token) -> str:
        return self.sources.get_span(token.span)

    def _expect(self, token_type: TokenType) -> Token:
        token = self._next()
        if token is None:
            raise MissingTokenError(token_type)
        if token.type != token_type:
            raise UnexpectedTokenError(token_type, token, self._text(token))
        return token

    def _consume_or_eof(self, token_type: TokenType) -> None:
        token = self._next()
        if token is not None and token.type != token_type:
            raise UnexpectedTokenError(token_type, token, self._text(token))

    # -------------------------------------------------------------------------
    # Grammar
    # -------------------------------------------------------------------------

    def _parse_line(self) -> List[Item]:
        items: List[Item] = []

        if self._peek_is(TokenType.NEWLINE):
            self._next()
            return items

        if self._peek_is(TokenType.LABEL):
            items.append(self._parse_label_definition(self._next()))
            if self._at_line_end():
                self._consume_or_eof(TokenType.NEWLINE)
                return items

        items.append(self._parse_instruction())
        self._consume_or_eof(TokenType.NEWLINE)
        return items

    def _parse_label_definition(self, token: Token) -> LabelItem:
        text = self._text(token)
        if self.pending_label:
            raise ExpectedInstructionBeforeLabelError(token, text)

        name = text[:-1]  # strip the colon
        label_id = self.labels.get_id(name)

        if label_id is None:
            label_id = self.labels.insert_unique(name, token.span)
        elif self.labels.get_span(label_id) is not None:
            raise DuplicateLabelError(token, text)
        else:
            # Seen before only as a forward reference
            self.labels.set_span(label_id, token.span)

        self.pending_label = True
        return LabelItem(label_id)

    def _parse_instruction(self) -> Instruction:
        token = self._next()
        if token is None:
            raise InternalAssemblerError("Attempted to parse instruction from empty token stream")

        text = self._text(token)
        if token.type != TokenType.IDENTIFIER:
            raise ExpectedInstructionError(token, text)

        opcode = parse_opcode(text)
        if opcode is None:
            raise InvalidInstructionError(token, text)

        rules = get_instruction(opcode).operands
        operands: List[Operand] = []

        if not rules:
            if not self._at_line_end():
                extra = self._next()
                raise ExpectedNoOperandsError(extra, self._text(extra))
        elif len(rules) == 1:
            operands.append(self._parse_operand(token, rules[0]))
        elif len(rules) == 2:
            operands.append(self._parse_operand(token, rules[0]))
            self._expect(TokenType.COMMA)
            operands.append(self._parse_operand(token, rules[1]))
        else:
            raise InternalAssemblerError(
                f"Instructions with {len(rules)} operands are not supported"
            )

        self.pending_label = False
        return Instruction(opcode=opcode, operands=tuple(operands), span=token.span)

    def _parse_operand(self, instruction_token: Token, rule: OperandRule) -> Operand:
        token = self._next()
        if token is None:
            raise ExpectedOperandFoundEOFError(instruction_token, self._text(instruction_token))

        text = self._text(token)
        accepts_identifier = OperandType.REGISTER in rule or OperandType.LABEL in rule
        accepts_integer = OperandType.INTEGER in rule

        if token.type == TokenType.IDENTIFIER and accepts_identifier:
            if OperandType.REGISTER in rule:
                try:
                    return RegisterOperand(value=parse_register(text), span=token.span)
                except ValueError:
                    if OperandType.LABEL not in rule:
                        raise ExpectedRegisterError(token, text)
            label_id = self.labels.get_or_insert_reference(text)
            return LabelOperand(label_id=label_id, span=token.span)

        if token.type == TokenType.INTEGER and accepts_integer:
            try:
                value = parse_integer(text)
            except ValueError:
                raise IntegerOutOfRangeError(token, text)
            return IntegerOperand(value=value, span=token.span)

        raise ExpectedOperandError(token, text, describe_rule(rule))


def parse(tokens: List[Token], sources: SourceIndex) -> Tuple[List[Item], LabelTable]:
    """Parse a filtered token stream. See Parser."""
    return Parser(tokens, sources).parse()
