from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TypeAlias


# Totals are kept within signed 64-bit range; anything outside is an overflow.
INT_MIN: int = -(2**63)
INT_MAX: int = 2**63 - 1


class TokenKind(str, Enum):
    NUMBER = "number"
    DIE = "die"
    OPERATOR = "operator"
    END = "end"


class Operator(str, Enum):
    ADD = "+"
    SUB = "-"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    position: int
    value: int = 0
    count: int = 1
    sides: int = 0
    op: Operator | None = None

    def __str__(self) -> str:
        if self.kind is TokenKind.NUMBER:
            return str(self.value)
        if self.kind is TokenKind.DIE:
            return f"{self.count}d{self.sides}"
        if self.kind is TokenKind.OPERATOR and self.op is not None:
            return self.op.value
        return "end of input"


@dataclass(frozen=True)
class Literal:
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class DiceRoll:
    count: int
    sides: int

    def __str__(self) -> str:
        return f"{self.count}d{self.sides}" if self.count != 1 else f"d{self.sides}"


@dataclass(frozen=True)
class BinaryOp:
    op: Operator
    left: ExprNode
    right: ExprNode

    def __str__(self) -> str:
        # Iterate down the left spine; chains can be longer than the recursion limit.
        tail: list[str] = []
        node: ExprNode | None = self
        while isinstance(node, BinaryOp):
            right = f"({node.right})" if isinstance(node.right, BinaryOp) else str(node.right)
            if node.op is Operator.SUB and node.left == Literal(0):
                # A leading minus is parsed as 0 - term.
                tail.append(f"-{right}")
                node = None
                break
            tail.append(f" {node.op.value} {right}")
            node = node.left
        head = "" if node is None else str(node)
        return head + "".join(reversed(tail))


ExprNode: TypeAlias = Literal | DiceRoll | BinaryOp


@dataclass(frozen=True)
class RollDetail:
    count: int
    sides: int
    rolls: tuple[int, ...]

    @property
    def subtotal(self) -> int:
        return sum(self.rolls)


@dataclass(frozen=True)
class Statement:
    label: str | None
    expression: ExprNode
    text: str


@dataclass(frozen=True)
class EvaluationResult:
    label: str | None
    total: int
    details: tuple[RollDetail, ...] = ()
