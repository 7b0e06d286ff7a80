import numpy as np
import pytest

from descentAPP.core.errors import (
    DimensionMismatchError,
    EvaluationError,
    InvalidExpressionError,
    ParseError,
    ParserError,
)
from descentAPP.core.expression import ParsedFunction, parse_function, variable_names


def test_evaluate_sphere() -> None:
    f = ParsedFunction("x1^2 + x2^2", 2)
    assert f.num_vars == 2
    assert f.evaluate(np.array([1.0, 2.0])) == pytest.approx(5.0)
    assert f([3.0, 4.0]) == pytest.approx(25.0)


def test_evaluate_is_deterministic() -> None:
    f = parse_function("sin(x1) * exp(x2) + x3^3 / 7", 3)
    point = np.array([0.3, -1.7, 2.9])
    first = f.evaluate(point)
    for _ in range(10):
        assert f.evaluate(point) == first


def test_transcendental_functions_and_constants() -> None:
    f = ParsedFunction("sin(x1) + exp(x2) + ln(E) + cos(pi) + abs(x1 - 2)", 2)
    assert f.evaluate([0.0, 0.0]) == pytest.approx(0.0 + 1.0 + 1.0 - 1.0 + 2.0)


def test_parse_error_on_incomplete_expression() -> None:
    with pytest.raises(ParseError):
        ParsedFunction("x1 +", 2)


def test_parse_error_on_empty_text() -> None:
    with pytest.raises(ParseError):
        ParsedFunction("   ", 1)


@pytest.mark.parametrize(
    "text",
    [
        "x1 + y",
        "x1 + x3",
        "foo(x1)",
        "x1, x2",
        "1/x1",
    ],
)
def test_invalid_expression(text: str) -> None:
    with pytest.raises(InvalidExpressionError):
        ParsedFunction(text, 2)


@pytest.mark.parametrize("text", ["exit()", "__import__('os')", "open(x1)"])
def test_python_builtins_are_not_reachable(text: str) -> None:
    with pytest.raises(ParserError):
        ParsedFunction(text, 1)


def test_attribute_chain_cannot_run_code(tmp_path) -> None:
    marker = tmp_path / "marker.txt"
    text = (
        "x1 + 0*().__class__.__base__.__subclasses__()[140].__init__"
        f".__globals__['system']('echo hit > {marker}')"
    )
    with pytest.raises(ParseError):
        ParsedFunction(text, 1)
    assert not marker.exists()


@pytest.mark.parametrize(
    "text",
    [
        "x1.real",
        "x1 + 'a'",
        "[x1][0]",
        "x1 + _x",
        "(lambda: x1)()",
        "x1 if x1 else x1",
        "Symbol(x1)",
        "x1 + 0x10",
        "x1 % 2",
        "x1 < 2",
    ],
)
def test_non_arithmetic_syntax_is_parse_error(text: str) -> None:
    with pytest.raises(ParseError):
        ParsedFunction(text, 1)


@pytest.mark.parametrize("text", ["x1 + 9^9^9", "x1 * 10**10**10"])
def test_huge_literal_power_fails_fast(text: str) -> None:
    # ціла арифметика з такими степенями не завершилась би
    with pytest.raises(InvalidExpressionError):
        ParsedFunction(text, 1)


def test_integer_literals_keep_their_values() -> None:
    f = ParsedFunction("2^10 + 7/2 - x1^3", 1)
    assert f.evaluate([-2.0]) == pytest.approx(1024.0 + 3.5 + 8.0)


def test_dimension_mismatch_longer_point() -> None:
    f = ParsedFunction("x1 + x2", 2)
    with pytest.raises(DimensionMismatchError):
        f.evaluate(np.array([1.0, 2.0, 3.0]))


def test_dimension_mismatch_shorter_point() -> None:
    f = ParsedFunction("x1 + x2", 2)
    with pytest.raises(DimensionMismatchError):
        f.evaluate([1.0])


def test_zero_variables_rejected() -> None:
    with pytest.raises(DimensionMismatchError):
        ParsedFunction("1", 0)


def test_division_by_zero_at_point() -> None:
    f = ParsedFunction("1/(x1 - 1)", 1)
    assert f.evaluate([0.0]) == pytest.approx(-1.0)
    with pytest.raises(EvaluationError):
        f.evaluate([1.0])


def test_log_domain_error_at_point() -> None:
    f = ParsedFunction("log(x1 + 1)", 1)
    with pytest.raises(EvaluationError):
        f.evaluate([-2.0])


def test_complex_result_is_evaluation_error() -> None:
    f = ParsedFunction("x1^0.5", 1)
    assert f.evaluate([4.0]) == pytest.approx(2.0)
    with pytest.raises(EvaluationError):
        f.evaluate([-1.0])


def test_overflow_is_evaluation_error() -> None:
    f = ParsedFunction("exp(x1)", 1)
    with pytest.raises(EvaluationError):
        f.evaluate([1e6])


def test_variable_names() -> None:
    assert variable_names(3) == ["x1", "x2", "x3"]
