from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional

from behavioral.interpreter.expression_tree import Expression, Literal, Product, Sum, evaluate

logger = logging.getLogger(__name__)

__all__ = [
    "MAX_NESTING",
    "ParseError",
    "TokenKind",
    "Token",
    "tokenize",
    "Parser",
    "parse",
    "interpret",
]

# ==========================
# Module: expression_parser
# Purpose: Lexing + recursive-descent parsing of infix arithmetic text into
#          an expression tree, so it can be interpreted.
# Grammar:
#   expr   := term ('+' term)*
#   term   := factor ('*' factor)*
#   factor := INTEGER | '(' expr ')'
# Parentheses nest at most MAX_NESTING levels; operator chains have no limit.
# ==========================


MAX_NESTING = 200


class ParseError(ValueError):
    """
    Raised when expression text cannot be tokenized or parsed.

    :param message: Human-readable description of the problem.
    :param position: 0-based offset in the source text where it was detected.
    """

    def __init__(self, message: str, position: int) -> None:
        super().__init__(f"{message} at position {position}")
        self.position = position


class TokenKind(Enum):
    INTEGER = auto()
    PLUS = auto()
    TIMES = auto()
    LPAREN = auto()
    RPAREN = auto()


_SINGLE_CHAR_TOKENS = {
    "+": TokenKind.PLUS,
    "*": TokenKind.TIMES,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
}


@dataclass(frozen=True, slots=True)
class Token:
    """
    Lexical unit of the expression language.

    :ivar kind: Token category.
    :ivar text: Exact source text of the token.
    :ivar position: 0-based offset of the first character.
    """
    kind: TokenKind
    text: str
    position: int


def tokenize(text: str) -> List[Token]:
    """
    Splits source text into tokens, skipping whitespace.

    :param text: Expression source, e.g. "(3 + 5) * 2".
    :return: Tokens in source order.
    :raises ParseError: On any character outside the language.
    """
    tokens: List[Token] = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch.isspace():
            i += 1
        elif ch in _SINGLE_CHAR_TOKENS:
            tokens.append(Token(_SINGLE_CHAR_TOKENS[ch], ch, i))
            i += 1
        elif "0" <= ch <= "9":
            start = i
            while i < len(text) and "0" <= text[i] <= "9":
                i += 1
            tokens.append(Token(TokenKind.INTEGER, text[start:i], start))
        else:
            raise ParseError(f"Unexpected character {ch!r}", i)
    return tokens


class Parser:
    """
    Recursive-descent parser over a token list.

    Both operators are left-associative; '*' binds tighter than '+'.

    :param tokens: Output of `tokenize`.
    :param source_length: Length of the source text, used to report
                          end-of-input errors.
    """

    def __init__(self, tokens: List[Token], source_length: int = 0) -> None:
        self._tokens = tokens
        self._index = 0
        self._end = source_length
        self._nesting = 0

    def parse(self) -> Expression:
        """
        Parses the whole token list.

        :return: Root of the expression tree.
        :raises ParseError: On empty input, unexpected or trailing tokens,
                            or parentheses nested deeper than MAX_NESTING.
        """
        if not self._tokens:
            raise ParseError("Empty expression", 0)
        node = self._expr()
        leftover = self._peek()
        if leftover is not None:
            raise ParseError(f"Unexpected {leftover.text!r}", leftover.position)
        return node

    def _peek(self) -> Optional[Token]:
        if self._index < len(self._tokens):
            return self._tokens[self._index]
        return None

    def _advance(self) -> Token:
        token = self._peek()
        if token is None:
            raise ParseError("Unexpected end of input", self._end)
        self._index += 1
        return token

    def _accept(self, kind: TokenKind) -> bool:
        token = self._peek()
        if token is not None and token.kind is kind:
            self._index += 1
            return True
        return False

    def _expr(self) -> Expression:
        node = self._term()
        while self._accept(TokenKind.PLUS):
            node = Sum(node, self._term())
        return node

    def _term(self) -> Expression:
        node = self._factor()
        while self._accept(TokenKind.TIMES):
            node = Product(node, self._factor())
        return node

    def _factor(self) -> Expression:
        token = self._advance()
        if token.kind is TokenKind.INTEGER:
            try:
                return Literal(int(token.text))
            except ValueError as exc:
                # int() refuses literals beyond sys.get_int_max_str_digits().
                raise ParseError("Integer literal too long", token.position) from exc
        if token.kind is TokenKind.LPAREN:
            if self._nesting >= MAX_NESTING:
                raise ParseError(f"Parentheses nested deeper than {MAX_NESTING}", token.position)
            self._nesting += 1
            node = self._expr()
            self._nesting -= 1
            if not self._accept(TokenKind.RPAREN):
                closing = self._peek()
                position = closing.position if closing is not None else self._end
                raise ParseError("Expected ')'", position)
            return node
        raise ParseError(f"Unexpected {token.text!r}", token.position)


def parse(text: str) -> Expression:
    """
    Parses infix arithmetic text into an expression tree.

    :param text: Expression source.
    :return: Root of the expression tree.
    :raises ParseError: If the text is not a valid expression.
    """
    tokens = tokenize(text)
    logger.debug("Parsing %d tokens from %r", len(tokens), text)
    return Parser(tokens, source_length=len(text)).parse()


def interpret(text: str) -> int:
    """Parses and evaluates expression text in one step."""
    return evaluate(parse(text))
