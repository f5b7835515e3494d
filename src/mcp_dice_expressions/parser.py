from __future__ import annotations

from collections.abc import Iterable, Iterator

from .errors import ErrorKind, ParseError
from .lexer import Lexer
from .models import BinaryOp, DiceRoll, ExprNode, Literal, Operator, Token, TokenKind


class _TokenStream:
    def __init__(self, tokens: Iterable[Token]) -> None:
        self._tokens: Iterator[Token] = iter(tokens)
        self._last_position = 0
        self.current = self._advance()

    def _advance(self) -> Token:
        tok = next(self._tokens, None)
        if tok is None:
            # A stream that runs dry without END is treated as ended.
            return Token(TokenKind.END, self._last_position)
        self._last_position = tok.position
        return tok

    def next(self) -> Token:
        tok = self.current
        if tok.kind is not TokenKind.END:
            self.current = self._advance()
        return tok

    def leftover(self) -> Token | None:
        return next(self._tokens, None)


def _unexpected(tok: Token, wanted: str) -> ParseError:
    return ParseError(
        ErrorKind.UNEXPECTED_TOKEN,
        f"Expected {wanted} but found {tok}. Example: '2d10 + 2d4 + 4'.",
        position=tok.position,
        token=tok,
    )


def _term(stream: _TokenStream) -> ExprNode:
    tok = stream.next()
    if tok.kind is TokenKind.NUMBER:
        return Literal(tok.value)
    if tok.kind is TokenKind.DIE:
        return DiceRoll(count=tok.count, sides=tok.sides)
    raise _unexpected(tok, "a number or dice like 'd6'")


def parse(tokens: Iterable[Token]) -> ExprNode:
    """Build a left-associative expression tree from one statement's tokens.

    expression := ['+' | '-'] term (('+' | '-') term)*
    term       := NUMBER | DIE

    A leading '-' negates the first term and is represented as ``0 - term``.
    """

    stream = _TokenStream(tokens)
    if stream.current.kind is TokenKind.END:
        raise ParseError(
            ErrorKind.EMPTY_EXPRESSION,
            "No dice or modifiers found. Example: 'd20' or '2d6 + 3'.",
            position=stream.current.position,
        )

    node: ExprNode
    if stream.current.kind is TokenKind.OPERATOR:
        sign = stream.next()
        node = _term(stream)
        if sign.op is Operator.SUB:
            node = BinaryOp(Operator.SUB, Literal(0), node)
    else:
        node = _term(stream)

    while stream.current.kind is not TokenKind.END:
        tok = stream.next()
        if tok.kind is not TokenKind.OPERATOR or tok.op is None:
            raise _unexpected(tok, "'+' or '-'")
        node = BinaryOp(tok.op, node, _term(stream))

    extra = stream.leftover()
    if extra is not None:
        raise ParseError(
            ErrorKind.TRAILING_INPUT,
            f"Unexpected {extra} after the end of the expression.",
            position=extra.position,
            token=extra,
        )
    return node


def parse_expression(text: str, offset: int = 0) -> ExprNode:
    return parse(Lexer(text, offset))
