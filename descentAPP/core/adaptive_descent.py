"""
adaptive_descent.py

Градієнтний спуск з адаптивним кроком як стратегія Optimizer.

Ідея:
    x_{k+1} = x_k + α_k * p_k,
    де p_k = -∇f(x_k) (чисельний градієнт, права різниця, eps = 1e-6),
        α_k – перший крок із послідовності α, α·decay, α·decay², ...
              (не більше 20 спроб), для якого f строго зменшується.

    Крок α запам'ятовується між ітераціями: після успіху
    α ← min(α_k * step_increase, 1.0), тому на "добрих" ділянках
    крок росте, а після дроблення наступна ітерація стартує з меншого.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import numpy as np

from .functions import ScalarFunction
from .line_search import MAX_TRIALS, adaptive_backtracking, next_step
from .optimizer_base import Optimizer, StepResult

logger = logging.getLogger(__name__)


class AdaptiveGradientDescent(Optimizer):
    """
    Градієнтний спуск з адаптивним вибором кроку.

    Налаштування (options):
        initial_step   : початковий крок (default: 1.0)
        step_decay     : коефіцієнт дроблення кроку, 0 < decay < 1 (default: 0.5)
        step_increase  : коефіцієнт збільшення кроку після успіху (default: 1.2)
        tolerance      : поріг норми градієнта для зупинки (default: 1e-6)
        max_trials     : ліміт спроб backtracking на ітерацію (default: 20)
        grad_eps       : збурення для чисельного градієнта (default: 1e-6)

    Причини зупинки, які метод повертає в meta["stopped_by"]:
        "tolerance" – ||∇f(x_k)|| < tolerance;
        "stall"     – жоден з пробних кроків не зменшив f.
    """

    def __init__(
        self,
        func: ScalarFunction,
        options: Optional[Dict[str, Any]] = None,
        name: Optional[str] = None,
    ) -> None:
        super().__init__(
            func=func,
            options=options,
            name=name or "Adaptive gradient descent",
        )

    def initialize(self, x0: np.ndarray) -> None:
        super().initialize(x0)
        self.state["step"] = float(self.options.get("initial_step", 1.0))

    @property
    def current_step(self) -> float:
        """Запам'ятований крок, з якого стартує наступний backtracking."""
        return float(self.state.get("step", self.options.get("initial_step", 1.0)))

    def _step_impl(self, x_k: np.ndarray, f_k: float) -> StepResult:
        tolerance = float(self.options.get("tolerance", 1e-6))
        step_decay = float(self.options.get("step_decay", 0.5))
        step_increase = float(self.options.get("step_increase", 1.2))
        max_trials = int(self.options.get("max_trials", MAX_TRIALS))

        g_k = self.eval_grad(x_k)
        grad_norm = float(np.linalg.norm(g_k, ord=2))

        if grad_norm < tolerance:
            return StepResult(
                x_new=x_k,
                f_new=f_k,
                step=0.0,
                meta={"grad_norm": grad_norm, "stopped_by": "tolerance"},
            )

        p_k = -g_k

        def phi(alpha: float) -> float:
            return self.eval_f(x_k + alpha * p_k)

        ls = adaptive_backtracking(
            phi,
            f0=f_k,
            alpha0=self.current_step,
            decay=step_decay,
            max_trials=max_trials,
        )

        if not ls.accepted:
            logger.debug(
                "no improving step in %d trials from f=%.6g (grad_norm=%.3e)",
                ls.iterations,
                f_k,
                grad_norm,
            )
            return StepResult(
                x_new=x_k,
                f_new=f_k,
                step=0.0,
                meta={
                    "grad_norm": grad_norm,
                    "trials": ls.iterations,
                    "eval_errors": ls.meta.get("eval_errors", 0),
                    "stopped_by": "stall",
                },
            )

        # Нова точка – новий масив, старий не змінюється
        x_new = x_k + ls.alpha * p_k
        x_new.setflags(write=False)
        self.state["step"] = next_step(ls.alpha, step_increase)

        return StepResult(
            x_new=x_new,
            f_new=float(ls.phi_value),
            step=float(ls.alpha),
            meta={
                "grad_norm": grad_norm,
                "trials": ls.iterations,
                "eval_errors": ls.meta.get("eval_errors", 0),
                "next_step": self.state["step"],
            },
        )


__all__ = [
    "AdaptiveGradientDescent",
]
