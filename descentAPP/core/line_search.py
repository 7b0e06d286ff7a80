"""
line_search.py

Адаптивний пошук кроку (backtracking) вздовж напрямку спуску.

Ідея:
    - працюємо з допоміжною функцією φ(α) = f(x_k + α p_k);
    - стартуємо з поточного ("запам'ятованого") кроку α0;
    - приймаємо перший пробний крок, для якого φ(α) < φ(0) (строге зменшення);
    - інакше α ← α * decay і пробуємо знову, не більше max_trials разів;
    - пробна точка, у якій f не обчислюється (EvaluationError), вважається
      просто невдалою спробою, а не фатальною помилкою прогону.

Збільшення кроку після успіху (next_step) робить метод оптимізації,
бо саме він зберігає крок між ітераціями.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict

from .errors import EvaluationError

logger = logging.getLogger(__name__)

# Скалярова функція від одного аргументу α
Scalar1DFunction = Callable[[float], float]

LINE_SEARCH_ADAPTIVE = "adaptive_backtracking"

# Максимальна кількість пробних кроків на одну ітерацію
MAX_TRIALS = 20

# Верхня межа для запам'ятованого кроку
MAX_STEP = 1.0


@dataclass
class LineSearchResult:
    """
    Результат пошуку кроку.

    Атрибути:
        alpha       - прийнятий крок; якщо крок не знайдено, то
                      alpha0 * decay^max_trials;
        phi_value   - φ(alpha) для прийнятого кроку, інакше φ(0);
        accepted    - чи знайдено крок зі строгим зменшенням φ;
        iterations  - кількість пробних кроків;
        func_evals  - кількість викликів φ (включно з невдалими);
        meta        - службова інформація (кількість помилок обчислення тощо).
    """
    alpha: float
    phi_value: float
    accepted: bool
    iterations: int
    func_evals: int
    meta: Dict[str, Any] = field(default_factory=dict)


def adaptive_backtracking(
    phi: Scalar1DFunction,
    f0: float,
    alpha0: float,
    decay: float,
    max_trials: int = MAX_TRIALS,
) -> LineSearchResult:
    """
    Backtracking зі строгим зменшенням φ.

    Parameters
    ----------
    phi : Callable[[float], float]
        φ(α) = f(x_k + α p_k).
    f0 : float
        φ(0) = f(x_k).
    alpha0 : float
        Початковий пробний крок (запам'ятований крок методу).
    decay : float
        Множник зменшення кроку, 0 < decay < 1.
    max_trials : int
        Ліміт пробних кроків (default: 20).
    """
    alpha = float(alpha0)
    func_evals = 0
    eval_errors = 0

    for trial in range(1, max_trials + 1):
        func_evals += 1
        try:
            phi_alpha = phi(alpha)
        except EvaluationError as exc:
            eval_errors += 1
            logger.debug("trial %d: alpha=%.3e rejected (%s)", trial, alpha, exc)
        else:
            if phi_alpha < f0:
                return LineSearchResult(
                    alpha=alpha,
                    phi_value=phi_alpha,
                    accepted=True,
                    iterations=trial,
                    func_evals=func_evals,
                    meta={
                        "method": LINE_SEARCH_ADAPTIVE,
                        "alpha0": float(alpha0),
                        "eval_errors": eval_errors,
                    },
                )
        alpha *= decay

    return LineSearchResult(
        alpha=alpha,
        phi_value=f0,
        accepted=False,
        iterations=max_trials,
        func_evals=func_evals,
        meta={
            "method": LINE_SEARCH_ADAPTIVE,
            "alpha0": float(alpha0),
            "eval_errors": eval_errors,
            "stopped_by": "max_trials",
        },
    )


def next_step(accepted_alpha: float, increase: float, max_step: float = MAX_STEP) -> float:
    """Крок для наступної ітерації: α * increase, але не більше max_step."""
    return min(increase * accepted_alpha, max_step)


__all__ = [
    "LINE_SEARCH_ADAPTIVE",
    "MAX_TRIALS",
    "MAX_STEP",
    "LineSearchResult",
    "adaptive_backtracking",
    "next_step",
]
