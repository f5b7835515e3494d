from __future__ import annotations

import logging
import random
import secrets
from collections.abc import Callable, Iterable

from .errors import ErrorKind, EvalError
from .models import (
    INT_MAX,
    INT_MIN,
    BinaryOp,
    DiceRoll,
    EvaluationResult,
    ExprNode,
    Literal,
    Operator,
    RollDetail,
)


logger = logging.getLogger(__name__)

# Given a die size N, returns an integer in [1, N].
Roller = Callable[[int], int]


def system_roller() -> Roller:
    rng = secrets.SystemRandom()
    return lambda sides: rng.randint(1, sides)


def seeded_roller(seed: int) -> Roller:
    rng = random.Random(seed)
    return lambda sides: rng.randint(1, sides)


def scripted_roller(values: Iterable[int]) -> Roller:
    """Replay ``values`` in order, ignoring the die size. Raises when exhausted."""

    it = iter(values)

    def roll(sides: int) -> int:
        try:
            return next(it)
        except StopIteration:
            raise RuntimeError(f"scripted roller ran out of values (asked for a d{sides})") from None

    return roll


def _checked(value: int, what: str) -> int:
    if value < INT_MIN or value > INT_MAX:
        raise EvalError(
            ErrorKind.ARITHMETIC_OVERFLOW,
            f"{what} does not fit in a 64-bit integer.",
        )
    return value


def _roll(node: DiceRoll, roller: Roller, details: list[RollDetail]) -> int:
    # Every face is at least 1, so more than INT_MAX dice always overflow.
    _checked(node.count, f"The number of dice in {node}")
    _checked(node.sides, f"The number of sides in {node}")
    rolls: list[int] = []
    subtotal = 0
    for _ in range(node.count):
        face = roller(node.sides)
        rolls.append(face)
        subtotal = _checked(subtotal + face, f"The sum of {node}")
    details.append(RollDetail(count=node.count, sides=node.sides, rolls=tuple(rolls)))
    logger.debug("rolled %s -> %s", node, rolls)
    return subtotal


def _eval(node: ExprNode, roller: Roller, details: list[RollDetail]) -> int:
    # Walk down the left spine first so long chains like 1 + 1 + ... + 1 are
    # folded in a loop instead of recursing once per term.
    pending: list[BinaryOp] = []
    while isinstance(node, BinaryOp):
        pending.append(node)
        node = node.left

    if isinstance(node, Literal):
        total = _checked(node.value, f"The number {node.value}")
    else:
        total = _roll(node, roller, details)

    for op_node in reversed(pending):
        right = _eval(op_node.right, roller, details)
        if op_node.op is Operator.ADD:
            total = _checked(total + right, "The total")
        else:
            total = _checked(total - right, "The total")
    return total


def evaluate(node: ExprNode, roller: Roller) -> EvaluationResult:
    """Roll every dice term left to right and fold the arithmetic.

    The result carries no label; the session driver attaches it.
    """

    details: list[RollDetail] = []
    total = _eval(node, roller, details)
    return EvaluationResult(label=None, total=total, details=tuple(details))
