"""
app.py

Контролер сесії для GUI мінімізації функції n змінних.

Зв'язує:
    - форму параметрів (OptimizationConfig);
    - фоновий прогін (core.opt_job);
    - відображення результату (format_result).

Схема:
    GUI --[OptimizationConfig]--> OptimizationSession.start()
    GUI (кожен кадр) -----------> OptimizationSession.poll()
    GUI (кнопка "Стоп") --------> OptimizationSession.stop()

У сесії одночасно виконується не більше одного прогону.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from .core.config import OptimizationConfig
from .core.engine import IterationCallback, OptimizationEngine, OptimizerResult
from .core.errors import ConfigError, ParserError, RunInProgressError
from .core.functions import FUNCTIONS
from .core.opt_job import OptJob, poll_opt_job, start_opt_job, stop_opt_job, wait_opt_job

logger = logging.getLogger(__name__)


class SessionState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPING = "stopping"
    FINISHED = "finished"


def config_for_preset(key: str, **overrides) -> OptimizationConfig:
    """OptimizationConfig для формули з реєстру FUNCTIONS."""
    if key not in FUNCTIONS:
        raise ConfigError(f"Функція з ключем '{key}' не знайдена.")
    tf = FUNCTIONS[key]
    cfg = OptimizationConfig(formula=tf.formula, num_vars=tf.num_vars, x0=tf.x0)
    for name, value in overrides.items():
        if not hasattr(cfg, name):
            raise ConfigError(f"Невідомий параметр: {name}")
        setattr(cfg, name, value)
    return cfg


def format_result(result: OptimizerResult) -> str:
    """Текст результату для панелі візуалізації."""
    coords = ", ".join(f"{v:.6f}" for v in result.x)
    text = (
        f"Результат: x* = [{coords}], f(x*) = {result.f_x:.6f}, "
        f"ітерацій: {result.iterations}"
    )
    if result.terminated_early:
        text += "\nДостроково зупинено користувачем"
    elif result.error is not None:
        text += f"\nПрогін перервано: {result.error}"
    return text


class OptimizationSession:
    """
    Стан однієї сесії GUI: поточний прогін, останній результат та помилка.

    Переходи:
        IDLE --start()--> RUNNING --stop()--> STOPPING
        RUNNING / STOPPING --poll() з результатом--> FINISHED
        FINISHED --reset()--> IDLE (або одразу start())
    """

    def __init__(self, engine: Optional[OptimizationEngine] = None) -> None:
        self.engine = engine or OptimizationEngine()
        self.state = SessionState.IDLE
        self.job: Optional[OptJob] = None
        self.result: Optional[OptimizerResult] = None
        self.last_error: Optional[Exception] = None

    @property
    def is_busy(self) -> bool:
        return self.state in (SessionState.RUNNING, SessionState.STOPPING)

    def start(
        self,
        cfg: OptimizationConfig,
        callback: Optional[IterationCallback] = None,
    ) -> OptJob:
        """
        Запустити прогін.

        Помилки у формулі / параметрах кидаються одразу, сесія лишається IDLE,
        а сама помилка зберігається в last_error для показу у формі.
        """
        if self.is_busy:
            raise RunInProgressError("Оптимізація вже виконується.")

        self.last_error = None
        self.result = None
        try:
            job = start_opt_job(cfg, engine=self.engine, callback=callback)
        except (ParserError, ConfigError) as exc:
            logger.info("run rejected: %s", exc)
            self.last_error = exc
            self.state = SessionState.IDLE
            raise

        self.job = job
        self.state = SessionState.RUNNING
        return job

    def stop(self) -> None:
        if self.job is None or not self.is_busy:
            return
        stop_opt_job(self.job)
        self.state = SessionState.STOPPING

    def poll(self) -> Optional[OptimizerResult]:
        """Неблокуюча перевірка; викликається раз на кадр GUI."""
        if self.job is None:
            return None
        return self._finish(poll_opt_job(self.job))

    def wait(self, timeout: Optional[float] = None) -> Optional[OptimizerResult]:
        """Блокуюче очікування результату (скрипти, тести)."""
        if self.job is None:
            return None
        return self._finish(wait_opt_job(self.job, timeout=timeout))

    def _finish(self, result: Optional[OptimizerResult]) -> Optional[OptimizerResult]:
        if result is None:
            return None

        self.result = result
        self.job = None
        self.state = SessionState.FINISHED
        return result

    def reset(self) -> None:
        if self.is_busy:
            raise RunInProgressError("Неможливо скинути сесію під час оптимізації.")
        self.result = None
        self.last_error = None
        self.state = SessionState.IDLE


__all__ = [
    "SessionState",
    "config_for_preset",
    "format_result",
    "OptimizationSession",
]
