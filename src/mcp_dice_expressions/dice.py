from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from .config import Settings, get_settings
from .errors import ErrorKind, RequestError
from .evaluator import Roller, seeded_roller, system_roller
from .models import BinaryOp, DiceRoll, EvaluationResult, ExprNode, Statement
from .session import evaluate_statements, parse_session


logger = logging.getLogger(__name__)


def _now_utc_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def count_dice(node: ExprNode) -> int:
    total = 0
    stack = [node]
    while stack:
        n = stack.pop()
        if isinstance(n, BinaryOp):
            stack.extend((n.left, n.right))
        elif isinstance(n, DiceRoll):
            total += n.count
    return total


def format_result(statement: Statement, result: EvaluationResult, show_rolls: bool = True) -> str:
    """One explanation line, e.g. ``hp: 3d6 [4, 2, 5] => 11``.

    Unlabelled statements use the expression itself as the label.
    """

    label = statement.label if statement.label is not None else str(statement.expression)
    if not show_rolls or not result.details:
        return f"{label}: {result.total}"

    rolls = " ".join(str(list(d.rolls)) for d in result.details)
    if statement.label is None:
        return f"{label}: {rolls} => {result.total}"
    return f"{label}: {statement.expression} {rolls} => {result.total}"


def _result_payload(statement: Statement, result: EvaluationResult, show_rolls: bool) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "label": result.label,
        "expression": str(statement.expression),
        "total": result.total,
    }
    if show_rolls:
        payload["rolls"] = [
            {
                "count": d.count,
                "sides": d.sides,
                "rolls": list(d.rolls),
                "subtotal": d.subtotal,
            }
            for d in result.details
        ]
    return payload


def _pick_roller(settings: Settings) -> tuple[Roller, str]:
    if settings.seed is not None:
        return seeded_roller(settings.seed), "random.Random"
    return system_roller(), "secrets.SystemRandom"


def roll_from_text(
    text: str,
    *,
    roller: Roller | None = None,
    show_rolls: bool = True,
    settings: Settings | None = None,
) -> dict[str, Any]:
    """Parse every statement, check request limits, then roll. Raises DiceError for invalid input."""

    if settings is None:
        settings = get_settings()
    statements = parse_session(text)

    dice = sum(count_dice(s.expression) for s in statements)
    if dice > settings.max_dice:
        raise RequestError(
            ErrorKind.TOO_MANY_DICE,
            f"This request rolls {dice} dice; the limit is {settings.max_dice}. Example: '10d6 + 4'.",
        )

    if roller is None:
        roller, source = _pick_roller(settings)
    else:
        source = getattr(roller, "__qualname__", type(roller).__name__)

    results = evaluate_statements(statements, roller)
    logger.info("rolled %r: %s", text, [r.total for r in results])

    return {
        "request_id": uuid.uuid4().hex,
        "timestamp": _now_utc_iso(),
        "input": text,
        "rng": {
            "source": source,
            "nonce": str(uuid.uuid4()),
        },
        "results": [_result_payload(s, r, show_rolls) for s, r in zip(statements, results)],
        "explanation": "\n".join(format_result(s, r, show_rolls) for s, r in zip(statements, results)),
    }
