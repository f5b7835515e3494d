import pytest

from mcp_dice_expressions.errors import ErrorKind, EvalError, LexError, ParseError
from mcp_dice_expressions.evaluator import scripted_roller
from mcp_dice_expressions.models import DiceRoll, EvaluationResult, Literal, RollDetail
from mcp_dice_expressions.session import (
    evaluate_session,
    evaluate_statements,
    parse_session,
    split_label,
    split_statements,
)


@pytest.mark.parametrize(
    ("text", "pieces"),
    [
        ("2d6", [(0, "2d6")]),
        ("2d6;", [(0, "2d6")]),
        ("2d6;  ", [(0, "2d6")]),
        ("1; 2;3", [(0, "1"), (2, " 2"), (5, "3")]),
        ("1;;", [(0, "1"), (2, "")]),
        ("", [(0, "")]),
    ],
)
def test_split_statements(text, pieces):
    assert split_statements(text) == pieces


@pytest.mark.parametrize(
    ("piece", "expected"),
    [
        ("3d6", (None, "3d6", 0)),
        ("hp: 3d6", ("hp", " 3d6", 3)),
        ("  arrows in pouch :4d4 + 6", ("arrows in pouch", "4d4 + 6", 19)),
        ("a: b: 1", ("a", " b: 1", 2)),
    ],
)
def test_split_label(piece, expected):
    assert split_label(piece) == expected


def test_labelled_statements_in_order():
    results = evaluate_session(
        "hp: 3d6; arrows in pouch: 4d4 + 6",
        scripted_roller([1, 2, 3, 4, 4, 4, 4]),
    )
    assert results == [
        EvaluationResult(label="hp", total=6, details=(RollDetail(3, 6, (1, 2, 3)),)),
        EvaluationResult(label="arrows in pouch", total=22, details=(RollDetail(4, 4, (4, 4, 4, 4)),)),
    ]


def test_unlabelled_and_duplicate_labels():
    results = evaluate_session("x: 1; 2; x: 3", scripted_roller([]))
    assert [(r.label, r.total) for r in results] == [("x", 1), (None, 2), ("x", 3)]


def test_parse_session_keeps_expression_text():
    statements = parse_session("hp: 3d6 ; d20")
    assert [(s.label, s.expression, s.text) for s in statements] == [
        ("hp", DiceRoll(3, 6), "3d6"),
        (None, DiceRoll(1, 20), "d20"),
    ]


def test_evaluate_statements_attaches_labels():
    statements = parse_session("a: 4; b: d8")
    results = evaluate_statements(statements, scripted_roller([8]))
    assert [(r.label, r.total) for r in results] == [("a", 4), ("b", 8)]
    assert statements[0].expression == Literal(4)


@pytest.mark.parametrize(
    ("text", "error", "kind", "index", "label"),
    [
        ("1d6;;", ParseError, ErrorKind.EMPTY_EXPRESSION, 1, None),
        ("1d6; ; 2", ParseError, ErrorKind.EMPTY_EXPRESSION, 1, None),
        ("ok: 1d6 + + 3", ParseError, ErrorKind.UNEXPECTED_TOKEN, 0, "ok"),
        ("1; hp: d0", LexError, ErrorKind.INVALID_CHARACTER, 1, "hp"),
        ("1; 2; big: 9223372036854775807 + 1", EvalError, ErrorKind.ARITHMETIC_OVERFLOW, 2, "big"),
    ],
)
def test_first_failure_aborts(text, error, kind, index, label):
    with pytest.raises(error) as exc:
        evaluate_session(text, scripted_roller([1, 1, 1]))
    assert exc.value.kind is kind
    assert exc.value.statement_index == index
    assert exc.value.label == label
    assert str(exc.value).startswith(f"[{kind.value}] statement {index + 1}")


def test_error_positions_are_absolute():
    with pytest.raises(LexError) as exc:
        evaluate_session("1d6; hp: 2d6 x", scripted_roller([1, 1, 1]))
    assert exc.value.position == 13


def test_later_failure_does_not_roll_past_it():
    calls = []

    def roller(sides):
        calls.append(sides)
        return 1

    with pytest.raises(ParseError):
        evaluate_session("d4; d6 +; d8", roller)
    assert calls == [4]


def test_huge_numeral_reports_statement():
    with pytest.raises(EvalError) as exc:
        evaluate_session("1; hp: " + "9" * 5000, scripted_roller([]))
    assert exc.value.kind is ErrorKind.ARITHMETIC_OVERFLOW
    assert exc.value.statement_index == 1
    assert exc.value.label == "hp"
    assert str(exc.value).startswith("[ARITHMETIC_OVERFLOW] statement 2 ('hp')")
