from __future__ import annotations

import dataclasses
import logging

from .errors import DiceError
from .evaluator import Roller, evaluate
from .models import EvaluationResult, Statement
from .parser import parse_expression


logger = logging.getLogger(__name__)

STATEMENT_SEPARATOR = ";"
LABEL_SEPARATOR = ":"


def split_statements(text: str) -> list[tuple[int, str]]:
    """Split on ';' and return (offset, piece) pairs in source order.

    A blank piece after the final separator is dropped, so "2d6;" is one
    statement. Blank pieces anywhere else are kept and fail to parse.
    """

    pieces: list[tuple[int, str]] = []
    start = 0
    for chunk in text.split(STATEMENT_SEPARATOR):
        pieces.append((start, chunk))
        start += len(chunk) + len(STATEMENT_SEPARATOR)

    if len(pieces) > 1 and not pieces[-1][1].strip():
        pieces.pop()
    return pieces


def split_label(piece: str) -> tuple[str | None, str, int]:
    """Return (label, expression text, offset of the expression within piece)."""

    label, sep, rest = piece.partition(LABEL_SEPARATOR)
    if not sep:
        return None, piece, 0
    return label.strip(), rest, len(label) + len(sep)


def parse_session(text: str) -> list[Statement]:
    statements: list[Statement] = []
    for index, (offset, piece) in enumerate(split_statements(text)):
        label, expr_text, expr_offset = split_label(piece)
        try:
            expression = parse_expression(expr_text, offset + expr_offset)
        except DiceError as e:
            raise e.at_statement(index, label)
        statements.append(Statement(label=label, expression=expression, text=expr_text.strip()))
    return statements


def evaluate_statements(statements: list[Statement], roller: Roller) -> list[EvaluationResult]:
    results: list[EvaluationResult] = []
    for index, statement in enumerate(statements):
        try:
            result = evaluate(statement.expression, roller)
        except DiceError as e:
            raise e.at_statement(index, statement.label)
        logger.debug("statement %d %r: %s = %d", index, statement.label, statement.expression, result.total)
        results.append(dataclasses.replace(result, label=statement.label))
    return results


def evaluate_session(text: str, roller: Roller) -> list[EvaluationResult]:
    """Evaluate every ';'-separated statement of ``text`` in order.

    The first failing statement aborts the whole request; no partial results
    are returned.
    """

    results: list[EvaluationResult] = []
    for index, (offset, piece) in enumerate(split_statements(text)):
        label, expr_text, expr_offset = split_label(piece)
        try:
            result = evaluate(parse_expression(expr_text, offset + expr_offset), roller)
        except DiceError as e:
            raise e.at_statement(index, label)
        results.append(dataclasses.replace(result, label=label))
    return results
