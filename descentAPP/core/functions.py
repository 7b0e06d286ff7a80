"""
functions.py

Чисельний градієнт та реєстр тестових цільових функцій.

Формат:
    - функції працюють з вектором x: numpy.ndarray форми (n,);
    - numerical_gradient – градієнт за правою (forward) різницею,
      рівно n + 1 обчислень f на один виклик;
    - FUNCTIONS – реєстр готових формул (у текстовому вигляді) для вибору
      в GUI; кожна формула розбирається через ParsedFunction.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict

import numpy as np

ArrayLike = np.ndarray
ScalarFunction = Callable[[ArrayLike], float]

# Фіксоване збурення для градієнта в алгоритмі спуску
GRADIENT_EPS = 1e-6


# ---------------------------------------------------------------------------
# Чисельні похідні (права різниця)
# ---------------------------------------------------------------------------

def numerical_gradient(
    func: ScalarFunction,
    x: ArrayLike,
    h: float = GRADIENT_EPS,
) -> ArrayLike:
    """
    Чисельний градієнт за правою різницею.

    ∂f/∂x_i ≈ (f(x + h e_i) - f(x)) / h

    Значення f(x) обчислюється один раз і використовується для всіх
    координат, тобто разом n + 1 викликів func. Помилки обчислення
    (EvaluationError, DimensionMismatchError) передаються далі без змін.
    """
    if not h > 0.0:
        raise ValueError(f"numerical_gradient: крок h повинен бути > 0, отримано {h}")

    x = np.asarray(x, dtype=float)
    grad = np.zeros_like(x, dtype=float)

    f_x = func(x)

    for i in range(len(x)):
        x_fwd = x.copy()
        x_fwd[i] += h
        grad[i] = (func(x_fwd) - f_x) / h

    return grad


# ---------------------------------------------------------------------------
# Реєстр функцій для вибору в GUI
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TargetFunction:
    key: str
    name: str
    formula: str
    num_vars: int = 2
    x0: str = "2, 2"


FUNCTIONS: Dict[str, TargetFunction] = {
    "sphere": TargetFunction(
        key="sphere",
        name="f(x1, x2) = x1^2 + x2^2",
        formula="x1^2 + x2^2",
    ),
    "f2": TargetFunction(
        key="f2",
        name="f2(x1, x2) = (x1 - x2)^2 + (x1 + x2 - 10)^2 / 9",
        formula="(x1 - x2)^2 + (x1 + x2 - 10)^2 / 9",
        x0="0, 0",
    ),
    "f3": TargetFunction(
        key="f3",
        name="f3(x1, x2) = 5 * (x2 - 4*x1^3 + 3*x1)^2 + (x1 + 1)^2",
        formula="5 * (x2 - 4*x1^3 + 3*x1)^2 + (x1 + 1)^2",
        x0="0, 0",
    ),
    "f4": TargetFunction(
        key="f4",
        name="f4(x1, x2) = 5 * (x2 - 4*x1^3 + 3*x1)^2 + (x1 - 1)^2",
        formula="5 * (x2 - 4*x1^3 + 3*x1)^2 + (x1 - 1)^2",
        x0="0, 0",
    ),
    "f5": TargetFunction(
        key="f5",
        name="f5(x1, x2) = 100 * (x2 - x1^3 + x1)^2 + (x1 - 1)^2",
        formula="100 * (x2 - x1^3 + x1)^2 + (x1 - 1)^2",
        x0="0, 0",
    ),
    "f6": TargetFunction(
        key="f6",
        name="f6(x1, x2) = (0.01*(x1-3))^2 - (x2 - x1) + exp(20*(x2 - x1))",
        formula="(0.01*(x1 - 3))^2 - (x2 - x1) + exp(20*(x2 - x1))",
        x0="0, 0",
    ),
    "rosenbrock": TargetFunction(
        key="rosenbrock",
        name="f7(x1, x2) = 100 * (x2 - x1^2)^2 + (1 - x1)^2",
        formula="100 * (x2 - x1^2)^2 + (1 - x1)^2",
        x0="-1.2, 1",
    ),
    "f8": TargetFunction(
        key="f8",
        name="f8(x1, x2) = (x1 - 4)^2 + (x2 - 4)^2",
        formula="(x1 - 4)^2 + (x2 - 4)^2",
        x0="0, 0",
    ),
    "sphere3": TargetFunction(
        key="sphere3",
        name="f(x1, x2, x3) = x1^2 + 2*x2^2 + 3*x3^2",
        formula="x1^2 + 2*x2^2 + 3*x3^2",
        num_vars=3,
        x0="1, 1, 1",
    ),
}

__all__ = [
    "ArrayLike",
    "ScalarFunction",
    "GRADIENT_EPS",
    "numerical_gradient",
    "TargetFunction",
    "FUNCTIONS",
]
