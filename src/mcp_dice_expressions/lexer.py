from __future__ import annotations

import re
from collections.abc import Iterator

from .errors import ErrorKind, LexError
from .models import INT_MAX, Operator, Token, TokenKind


_TOKEN_RE = re.compile(
    r"""
    (?P<ws>\s+)
    | (?P<die>(?P<count>\d*)[dD](?P<sides>\d+))
    | (?P<number>\d+)
    | (?P<op>[+-])
    """,
    re.VERBOSE | re.ASCII,
)


def _to_int(digits: str) -> int:
    # Anything longer than INT_MAX has already overflowed; skip converting
    # it so huge numerals never reach the int() digit limit.
    significant = digits.lstrip("0")
    if len(significant) > len(str(INT_MAX)):
        return INT_MAX + 1
    return int(significant or "0")


class Lexer:
    """Lazy token stream over the text of one statement.

    Iterating twice starts over from the beginning. ``offset`` is added to
    every reported position so errors can point into the full request.
    """

    def __init__(self, text: str, offset: int = 0) -> None:
        self.text = text
        self.offset = offset

    def __iter__(self) -> Iterator[Token]:
        text = self.text
        pos = 0
        while pos < len(text):
            m = _TOKEN_RE.match(text, pos)
            if m is None:
                raise LexError(
                    ErrorKind.INVALID_CHARACTER,
                    f"Unexpected character {text[pos]!r}. Example: '2d6 + 3' or 'hp: 3d6; d20 - 1'.",
                    position=self.offset + pos,
                )

            start = self.offset + pos
            if m.group("die") is not None:
                sides = _to_int(m.group("sides"))
                if sides == 0:
                    raise LexError(
                        ErrorKind.INVALID_CHARACTER,
                        "Dice need at least one side. Example: 'd6' or '2d20'.",
                        position=self.offset + m.start("sides"),
                    )
                count_str = m.group("count")
                yield Token(
                    TokenKind.DIE,
                    start,
                    count=_to_int(count_str) if count_str else 1,
                    sides=sides,
                )
            elif m.group("number") is not None:
                yield Token(TokenKind.NUMBER, start, value=_to_int(m.group("number")))
            elif m.group("op") is not None:
                yield Token(TokenKind.OPERATOR, start, op=Operator(m.group("op")))
            # Whitespace produces nothing.
            pos = m.end()

        yield Token(TokenKind.END, self.offset + len(text))


def tokenize(text: str, offset: int = 0) -> Iterator[Token]:
    return iter(Lexer(text, offset))
