"""
Assembly source tokenizer.

Splits source text into identifiers, labels, integers, commas, newlines and
comments in a single left-to-right scan. Malformed input never stops the scan;
it shows up as InvalidToken/InvalidInteger tokens, which filter_tokens() turns
into errors before the token stream reaches the parser.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .errors import InvalidIntegerError, InvalidTokenError
from .sources import SourceIndex, Span


class TokenType(Enum):
    """Token categories produced by the lexer."""

    IDENTIFIER = "identifier"
    LABEL = "label"
    COMMA = "comma"
    INTEGER = "integer"
    NEWLINE = "newline"
    COMMENT = "comment"

    INVALID_TOKEN = "invalid token"
    INVALID_INTEGER = "invalid integer"


@dataclass(frozen=True)
class Token:
    type: TokenType
    span: Span


def _is_digit(char: str) -> bool:
    return "0" <= char <= "9"


def _is_identifier_char(char: str) -> bool:
    return char.isalnum() or char in ("_", "-")


class Lexer:
    """
    Single-pass lexer over one source unit.

    Example:
        >>> [t.type.value for t in Lexer("loop: j loop").lex()]
        ['label', 'identifier', 'identifier']
    """

    def __init__(self, source: str):
        self.source = source
        self.index = 0

    def lex(self) -> List[Token]:
        """Tokenize the whole source, including comments and invalid tokens."""
        tokens = []
        self.index = 0

        while True:
            char = self._peek()
            if char is None:
                break

            if char in (" ", "\t", "\r"):
                self.index += 1
                continue

            if char == "\n":
                token = self._single(TokenType.NEWLINE)
            elif char == ",":
                token = self._single(TokenType.COMMA)
            elif char == ";":
                token = self._lex_comment()
            elif _is_digit(char):
                token = self._lex_integer()
            elif char.isalpha():
                token = self._lex_identifier()
            else:
                token = self._single(TokenType.INVALID_TOKEN)

            tokens.append(token)

        return tokens

    def _peek(self) -> Optional[str]:
        if self.index < len(self.source):
            return self.source[self.index]
        return None

    def _single(self, token_type: TokenType) -> Token:
        token = Token(token_type, Span(self.index, 1))
        self.index += 1
        return token

    def _lex_comment(self) -> Token:
        start = self.index
        end = self.source.find("\n", start)
        if end == -1:
            end = len(self.source)
        self.index = end
        return Token(TokenType.COMMENT, Span(start, end - start))

    def _lex_integer(self) -> Token:
        start = self.index
        valid = True
        self.index += 1

        while True:
            char = self._peek()
            if char is None:
                break
            if _is_digit(char):
                self.index += 1
            elif char.isalpha():
                # 12ab is still consumed as one token, just not a valid one
                valid = False
                self.index += 1
            else:
                break

        token_type = TokenType.INTEGER if valid else TokenType.INVALID_INTEGER
        return Token(token_type, Span(start, self.index - start))

    def _lex_identifier(self) -> Token:
        start = self.index
        token_type = TokenType.IDENTIFIER
        self.index += 1

        while True:
            char = self._peek()
            if char is None:
                break
            if _is_identifier_char(char):
                self.index += 1
            elif char == ":":
                self.index += 1
                token_type = TokenType.LABEL
                break
            else:
                break

        return Token(token_type, Span(start, self.index - start))


def filter_tokens(tokens: List[Token], sources: SourceIndex) -> List[Token]:
    """
    Drop comments and reject invalid tokens.

    Args:
        tokens: Raw lexer output
        sources: Index over the same source the tokens came from

    Returns:
        Token list ready for the parser

    Raises:
        InvalidTokenError: On the first unrecognized character
        InvalidIntegerError: On the first malformed integer such as `12ab`
    """
    significant = []
    for token in tokens:
        if token.type == TokenType.INVALID_TOKEN:
            raise InvalidTokenError(token, sources.get_span(token.span))
        if token.type == TokenType.INVALID_INTEGER:
            raise InvalidIntegerError(token, sources.get_span(token.span))
        if token.type != TokenType.COMMENT:
            significant.append(token)
    return significant


def tokenize(sources: SourceIndex) -> List[Token]:
    """Lex and filter a source unit in one step."""
    return filter_tokens(Lexer(sources.source).lex(), sources)
