"""
config.py

Параметри запуску оптимізації та їх перевірка.

Значення за замовчуванням відповідають стартовому стану форми:
    f(x) = x1^2 + x2^2, n = 2, x0 = (2, 2),
    початковий крок 1.0, дроблення 0.5, збільшення 1.2,
    точність 1e-6, не більше 1000 ітерацій.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Real
from typing import Sequence, Union

import numpy as np

from .errors import ConfigError, DimensionMismatchError

PointInput = Union[str, Sequence[float], np.ndarray]


def parse_point(text: str, num_vars: int) -> np.ndarray:
    """
    Розібрати початкову точку у форматі "x1, x2, ..., xn".

    DimensionMismatchError – кількість компонент не дорівнює num_vars;
    ConfigError            – компонента не є скінченним дійсним числом.
    """
    parts = text.split(",")
    if len(parts) != num_vars:
        raise DimensionMismatchError(
            expected=num_vars,
            got=len(parts),
            message=(
                f"Початкова точка повинна мати {num_vars} компонент(и) "
                f"у форматі 'x1, x2', отримано {len(parts)}"
            ),
        )

    values = []
    for part in parts:
        try:
            value = float(part.strip())
        except ValueError as exc:
            raise ConfigError(f"Некоректна компонента початкової точки: {part.strip()!r}") from exc
        if not math.isfinite(value):
            raise ConfigError(f"Компонента початкової точки не скінченна: {part.strip()!r}")
        values.append(value)

    return np.array(values, dtype=float)


def _is_int(value: object) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


@dataclass
class OptimizationConfig:
    formula: str = "x1^2 + x2^2"
    num_vars: int = 2
    x0: PointInput = "2, 2"
    initial_step: float = 1.0
    step_decay: float = 0.5
    step_increase: float = 1.2
    tolerance: float = 1e-6
    max_iterations: int = 1000

    def validate(self) -> None:
        """Перевірити числові параметри; ConfigError при першій же помилці."""
        if not _is_int(self.num_vars):
            raise ConfigError(f"Розмірність n повинна бути цілим числом, отримано {self.num_vars!r}.")
        if not _is_int(self.max_iterations):
            raise ConfigError(
                f"Кількість ітерацій повинна бути цілим числом, отримано {self.max_iterations!r}."
            )
        for name in ("initial_step", "step_decay", "step_increase", "tolerance"):
            value = getattr(self, name)
            if not isinstance(value, Real) or isinstance(value, bool):
                raise ConfigError(f"Параметр {name} повинен бути числом, отримано {value!r}.")
        if self.num_vars < 1:
            raise ConfigError("Розмірність n повинна бути >= 1.")
        if not self.initial_step > 0.0:
            raise ConfigError("Початковий крок повинен бути додатним.")
        if not 0.0 < self.step_decay < 1.0:
            raise ConfigError("Коефіцієнт дроблення кроку повинен бути в (0, 1).")
        if not self.step_increase >= 1.0:
            raise ConfigError("Коефіцієнт збільшення кроку повинен бути >= 1.")
        if not self.tolerance > 0.0:
            raise ConfigError("Точність повинна бути додатною.")
        if self.max_iterations < 0:
            raise ConfigError("Максимальна кількість ітерацій не може бути від'ємною.")

    def start_point(self) -> np.ndarray:
        """Початкова точка як numpy-масив довжини num_vars."""
        if isinstance(self.x0, str):
            return parse_point(self.x0, self.num_vars)

        point = np.array(self.x0, dtype=float).ravel()
        if point.shape[0] != self.num_vars:
            raise DimensionMismatchError(expected=self.num_vars, got=point.shape[0])
        if not np.all(np.isfinite(point)):
            raise ConfigError("Компоненти початкової точки повинні бути скінченними.")
        return point

    def descent_options(self) -> dict:
        """Параметри для AdaptiveGradientDescent(options=...)."""
        return {
            "initial_step": float(self.initial_step),
            "step_decay": float(self.step_decay),
            "step_increase": float(self.step_increase),
            "tolerance": float(self.tolerance),
        }


__all__ = [
    "PointInput",
    "parse_point",
    "OptimizationConfig",
]
