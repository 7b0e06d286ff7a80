"""
optimizer_base.py

Базові класи та типи для методів оптимізації (Strategy).

Ідея:
    - абстрактний клас Optimizer тримає цільову функцію, лічильники
      викликів та внутрішній стан методу між ітераціями;
    - конкретний метод (AdaptiveGradientDescent) реалізує _step_impl();
    - движок (OptimizationEngine) викликає step() і вирішує, коли зупинитися.

Формат:
    step(x_k, f_k) -> StepResult
    Якщо метод сам вирішив зупинитися (збіжність, застій), він кладе
    причину в meta["stopped_by"], а x_new / f_new дорівнюють x_k / f_k.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import numpy as np

from .functions import ArrayLike, GRADIENT_EPS, ScalarFunction, numerical_gradient


# ---------------------------------------------------------------------------
# Результат одного кроку методу оптимізації
# ---------------------------------------------------------------------------

@dataclass
class StepResult:
    """
    Результат одного кроку оптимізації.

    Атрибути:
        x_new  - нова точка x_{k+1}
        f_new  - f(x_{k+1})
        step   - прийнятий крок α_k (0.0, якщо кроку не було)
        meta   - додаткова інформація (норма градієнта, причина зупинки, ...)
    """
    x_new: np.ndarray
    f_new: float
    step: float
    meta: Dict[str, Any] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Базовий клас Optimizer (Strategy)
# ---------------------------------------------------------------------------

class Optimizer(ABC):
    """
    Абстрактний базовий клас для методів оптимізації.

    Використання:
        opt = AdaptiveGradientDescent(func=ParsedFunction("x1^2 + x2^2", 2))
        opt.reset()
        opt.initialize(x0)
        res = opt.step(x_k, f_k)  # StepResult
    """

    def __init__(
        self,
        func: ScalarFunction,
        options: Optional[Dict[str, Any]] = None,
        name: Optional[str] = None,
    ) -> None:
        self.func = func
        self.options: Dict[str, Any] = options or {}
        self.name: str = name or self.__class__.__name__

        # Лічильники викликів (f рахується і всередині градієнта)
        self.func_evals: int = 0
        self.grad_evals: int = 0

        self.state: Dict[str, Any] = {}

    # ------------------------------------------------------------------
    # Обчислення f та ∇f із підрахунком викликів
    # ------------------------------------------------------------------

    def eval_f(self, x: ArrayLike) -> float:
        """Обчислити f(x) та збільшити лічильник викликів функції."""
        self.func_evals += 1
        return float(self.func(np.asarray(x, dtype=float)))

    def eval_grad(self, x: ArrayLike) -> np.ndarray:
        """Чисельний градієнт за правою різницею (n + 1 викликів f)."""
        self.grad_evals += 1
        eps = float(self.options.get("grad_eps", GRADIENT_EPS))
        return numerical_gradient(self.eval_f, np.asarray(x, dtype=float), eps)

    # ------------------------------------------------------------------
    # Життєвий цикл методу
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Скинути стан та лічильники перед новим запуском."""
        self.func_evals = 0
        self.grad_evals = 0
        self.state.clear()

    def initialize(self, x0: ArrayLike) -> None:
        self.state["x0"] = np.asarray(x0, dtype=float)

    def step(self, x_k: ArrayLike, f_k: float) -> StepResult:
        """
        Виконати один крок методу з поточної точки x_k, де f_k = f(x_k).
        """
        x_k_arr = np.asarray(x_k, dtype=float)
        result = self._step_impl(x_k_arr, float(f_k))

        if not isinstance(result, StepResult):
            raise TypeError(
                f"{self.__class__.__name__}._step_impl() "
                f"повинен повертати StepResult, отримано: {type(result)}"
            )

        return result

    @abstractmethod
    def _step_impl(self, x_k: np.ndarray, f_k: float) -> StepResult:
        raise NotImplementedError


__all__ = [
    "StepResult",
    "Optimizer",
]
