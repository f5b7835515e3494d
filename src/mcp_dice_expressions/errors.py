from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import Token


class ErrorKind(str, Enum):
    INVALID_CHARACTER = "INVALID_CHARACTER"
    UNEXPECTED_TOKEN = "UNEXPECTED_TOKEN"
    EMPTY_EXPRESSION = "EMPTY_EXPRESSION"
    TRAILING_INPUT = "TRAILING_INPUT"
    ARITHMETIC_OVERFLOW = "ARITHMETIC_OVERFLOW"
    TOO_MANY_DICE = "TOO_MANY_DICE"


class DiceError(ValueError):
    """User-facing errors (fail-fast, no partial results).

    The message always starts with a stable ``[KIND]`` prefix so callers can
    match on it without importing the enum.
    """

    def __init__(
        self,
        kind: ErrorKind,
        detail: str,
        position: int | None = None,
        token: Token | None = None,
    ) -> None:
        self.kind = kind
        self.detail = detail
        self.position = position
        self.token = token
        self.statement_index: int | None = None
        self.label: str | None = None
        super().__init__(self._render())

    def at_statement(self, index: int, label: str | None) -> "DiceError":
        self.statement_index = index
        self.label = label
        self.args = (self._render(),)
        return self

    def _render(self) -> str:
        parts = [f"[{self.kind.value}]"]
        if self.statement_index is not None:
            where = f"statement {self.statement_index + 1}"
            if self.label:
                where += f" ({self.label!r})"
            parts.append(where + ":")
        parts.append(self.detail)
        if self.position is not None:
            parts.append(f"(at position {self.position})")
        return " ".join(parts)

    def __str__(self) -> str:
        return self._render()


class LexError(DiceError):
    pass


class ParseError(DiceError):
    pass


class EvalError(DiceError):
    pass


class RequestError(DiceError):
    """Rejected by request limits before any dice are rolled."""
