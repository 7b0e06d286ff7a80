"""
engine.py

Ітераційний двигун для запуску методу оптимізації (Optimizer).

Функціонал:
    - виконує цикл x_{k+1} = step(x_k) до max_iter прийнятих кроків;
    - на початку кожної ітерації перевіряє токен зупинки (CancellationToken);
    - формує трасу ітерацій (початкова точка + кожен прийнятий крок);
    - рахує кількість викликів цільової функції та градієнта;
    - фіксує причину зупинки ("tolerance", "stall", "max_iter",
      "cancelled", "error");
    - підтримує callback для оновлення GUI / логів на кожній ітерації.

Помилка обчислення в поточній точці (під час градієнта) не кидається
назовні: прогін завершується, а виняток кладеться в OptimizerResult.error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

import numpy as np

from .cancellation import CancellationToken
from .errors import DimensionMismatchError, EvaluationError
from .functions import ArrayLike
from .iteration_result import IterationResult, Snapshot
from .optimizer_base import Optimizer, StepResult

logger = logging.getLogger(__name__)

STOP_TOLERANCE = "tolerance"
STOP_STALL = "stall"
STOP_MAX_ITER = "max_iter"
STOP_CANCELLED = "cancelled"
STOP_ERROR = "error"


@dataclass(frozen=True)
class OptimizerResult:
    """
    Підсумок одного запуску оптимізації. Створюється один раз, при виході з циклу.

    Атрибути:
        method_name       - назва методу (Optimizer.name)
        x                 - кінцева точка
        f_x               - f(x)
        iterations        - кількість прийнятих ітерацій (без k=0)
        trace             - IterationResult для k = 0..iterations
        terminated_early  - True лише якщо прогін зупинив користувач
        stopped_by        - причина зупинки (див. константи STOP_*)
        func_evals        - кількість викликів цільової функції
        grad_evals        - кількість обчислень градієнта
        step              - запам'ятований крок на момент зупинки
        error             - помилка, через яку прогін не міг продовжуватися
    """
    method_name: str
    x: np.ndarray
    f_x: float
    iterations: int
    trace: Tuple[IterationResult, ...]
    terminated_early: bool
    stopped_by: str
    func_evals: int = 0
    grad_evals: int = 0
    step: float = 0.0
    error: Optional[Exception] = None

    @property
    def history(self) -> List[Snapshot]:
        """Траєкторія (x0, x1, f), рівно iterations + 1 записів."""
        return [rec.snapshot() for rec in self.trace]


# Тип callback'а для GUI/логів
IterationCallback = Callable[[IterationResult], None]


class OptimizationEngine:
    """
    Движок, який керує ітераційним процесом для заданого Optimizer.

    Налаштування за замовчуванням (можуть бути переозначені у run()):
        max_iter : максимальна кількість ітерацій (default: 1000)
    """

    def __init__(self, max_iter: int = 1000) -> None:
        self.max_iter_default = max_iter

    def run(
        self,
        optimizer: Optimizer,
        x0: ArrayLike,
        max_iter: Optional[int] = None,
        cancel_token: Optional[CancellationToken] = None,
        callback: Optional[IterationCallback] = None,
    ) -> OptimizerResult:
        """
        Запустити процес оптимізації.

        Помилка обчислення f(x0) кидається одразу: без значення в стартовій
        точці прогін неможливо почати.
        """
        x0 = np.array(x0, dtype=float)
        x0.setflags(write=False)
        max_iter = max_iter if max_iter is not None else self.max_iter_default

        optimizer.reset()
        optimizer.initialize(x0)

        f0 = optimizer.eval_f(x0)
        trace: List[IterationResult] = [IterationResult(index=0, x=x0, f=f0)]
        if callback is not None:
            callback(trace[0])

        x_k = x0
        f_k = f0
        stopped_by = STOP_MAX_ITER
        error: Optional[Exception] = None

        for k in range(1, max_iter + 1):
            if cancel_token is not None and cancel_token.is_cancelled():
                stopped_by = STOP_CANCELLED
                break

            try:
                step_res: StepResult = optimizer.step(x_k, f_k)
            except (EvaluationError, DimensionMismatchError) as exc:
                logger.warning("iteration %d: cannot evaluate at current point: %s", k, exc)
                stopped_by = STOP_ERROR
                error = exc
                break

            # Чи метод сам попросив зупинити процес?
            method_stopped = step_res.meta.get("stopped_by")
            if method_stopped is not None:
                stopped_by = str(method_stopped)
                break

            x_k = step_res.x_new
            f_k = step_res.f_new

            rec = IterationResult(
                index=k,
                x=x_k,
                f=f_k,
                step=step_res.step,
                meta=dict(step_res.meta),
            )
            trace.append(rec)
            logger.debug("iteration %d: f=%.10g step=%.3e", k, f_k, step_res.step)

            if callback is not None:
                callback(rec)

        iterations = len(trace) - 1
        logger.info(
            "%s finished: stopped_by=%s iterations=%d f=%.10g",
            optimizer.name,
            stopped_by,
            iterations,
            f_k,
        )

        return OptimizerResult(
            method_name=optimizer.name,
            x=x_k,
            f_x=f_k,
            iterations=iterations,
            trace=tuple(trace),
            terminated_early=stopped_by == STOP_CANCELLED,
            stopped_by=stopped_by,
            func_evals=optimizer.func_evals,
            grad_evals=optimizer.grad_evals,
            step=float(optimizer.state.get("step", 0.0)),
            error=error,
        )


__all__ = [
    "STOP_TOLERANCE",
    "STOP_STALL",
    "STOP_MAX_ITER",
    "STOP_CANCELLED",
    "STOP_ERROR",
    "IterationResult",
    "OptimizerResult",
    "IterationCallback",
    "OptimizationEngine",
]
