"""
iteration_result.py

Структура даних для одного запису траєкторії спуску.
Використовується і в движку, і в GUI (таблиця ітерацій, графік шляху).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

import numpy as np

# (x0, x1, f) – запис для побудови шляху на площині
Snapshot = Tuple[float, float, float]


@dataclass(frozen=True)
class IterationResult:
    """
    Опис однієї прийнятої ітерації.

    Атрибути:
        index  - номер ітерації (0 – початкова точка)
        x      - точка x_k (масив тільки для читання)
        f      - значення f(x_k)
        step   - прийнятий пробний крок α_k (для k=0 = 0.0)
        meta   - додаткова інформація (норма градієнта, кількість спроб, ...)
    """
    index: int
    x: np.ndarray
    f: float
    step: float = 0.0
    meta: Dict[str, Any] = field(default_factory=dict)

    def snapshot(self) -> Snapshot:
        """(x0, x1, f); для n = 1 друга координата дорівнює 0.0."""
        x1 = float(self.x[1]) if len(self.x) > 1 else 0.0
        return (float(self.x[0]), x1, float(self.f))


__all__ = [
    "Snapshot",
    "IterationResult",
]
