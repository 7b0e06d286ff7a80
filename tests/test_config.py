import numpy as np
import pytest

from descentAPP.core.config import OptimizationConfig, parse_point
from descentAPP.core.errors import ConfigError, DimensionMismatchError


def test_defaults_are_valid() -> None:
    cfg = OptimizationConfig()
    cfg.validate()
    np.testing.assert_array_equal(cfg.start_point(), [2.0, 2.0])
    assert cfg.descent_options() == {
        "initial_step": 1.0,
        "step_decay": 0.5,
        "step_increase": 1.2,
        "tolerance": 1e-6,
    }


def test_parse_point_strips_whitespace() -> None:
    np.testing.assert_array_equal(parse_point(" 1.5 ,-2, 3e-1 ", 3), [1.5, -2.0, 0.3])


def test_parse_point_wrong_arity() -> None:
    with pytest.raises(DimensionMismatchError):
        parse_point("1, 2, 3", 2)


@pytest.mark.parametrize("text", ["a, 2", "1, ", "inf, 1", "nan, 0"])
def test_parse_point_bad_number(text: str) -> None:
    with pytest.raises(ConfigError):
        parse_point(text, 2)


def test_start_point_from_sequence() -> None:
    cfg = OptimizationConfig(num_vars=3, x0=[1, 2, 3])
    np.testing.assert_array_equal(cfg.start_point(), [1.0, 2.0, 3.0])


def test_start_point_sequence_wrong_arity() -> None:
    cfg = OptimizationConfig(x0=[1.0])
    with pytest.raises(DimensionMismatchError):
        cfg.start_point()


@pytest.mark.parametrize(
    "overrides",
    [
        {"num_vars": 0},
        {"initial_step": 0.0},
        {"step_decay": 0.0},
        {"step_decay": 1.0},
        {"step_increase": 0.9},
        {"tolerance": 0.0},
        {"max_iterations": -1},
        {"num_vars": "2"},
        {"num_vars": 2.7},
        {"num_vars": True},
        {"max_iterations": 10.5},
        {"max_iterations": "100"},
        {"initial_step": "1.0"},
        {"tolerance": None},
    ],
)
def test_validate_rejects(overrides: dict) -> None:
    cfg = OptimizationConfig(**overrides)
    with pytest.raises(ConfigError):
        cfg.validate()


def test_zero_iterations_is_allowed() -> None:
    OptimizationConfig(max_iterations=0).validate()


def test_numpy_integers_are_accepted() -> None:
    OptimizationConfig(num_vars=np.int64(2), max_iterations=np.int32(10)).validate()
