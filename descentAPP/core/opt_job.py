"""
opt_job.py

Запуск оптимізації у фоновому потоці з можливістю зупинки.

    job = start_opt_job(cfg)      # перевірка формули / точки – синхронно
    ...
    stop_opt_job(job)             # кооперативна зупинка, не блокує
    result = poll_opt_job(job)    # None, поки прогін не завершився

Кожен прогін має власний CancellationToken та одномісну чергу для
результату. Робочий потік кладе в чергу рівно один OptimizerResult;
poll_opt_job повертає його один раз, далі – завжди None.
"""

from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .adaptive_descent import AdaptiveGradientDescent
from .cancellation import CancellationToken
from .config import OptimizationConfig
from .engine import STOP_ERROR, IterationCallback, OptimizationEngine, OptimizerResult
from .expression import ParsedFunction
from .iteration_result import IterationResult
from .optimizer_base import Optimizer

logger = logging.getLogger(__name__)


@dataclass
class OptJob:
    thread: threading.Thread
    cancel_token: CancellationToken
    results: "queue.Queue[OptimizerResult]"
    drained: bool = False


def _failed_result(optimizer: Optimizer, x0: np.ndarray, f0: float, exc: Exception) -> OptimizerResult:
    return OptimizerResult(
        method_name=optimizer.name,
        x=x0,
        f_x=f0,
        iterations=0,
        trace=(IterationResult(index=0, x=x0, f=f0),),
        terminated_early=False,
        stopped_by=STOP_ERROR,
        func_evals=optimizer.func_evals,
        grad_evals=optimizer.grad_evals,
        error=exc,
    )


def _run_worker(
    engine: OptimizationEngine,
    optimizer: Optimizer,
    x0: np.ndarray,
    f0: float,
    max_iter: int,
    cancel_token: CancellationToken,
    results: "queue.Queue[OptimizerResult]",
    callback: Optional[IterationCallback],
) -> None:
    try:
        result = engine.run(
            optimizer,
            x0,
            max_iter=max_iter,
            cancel_token=cancel_token,
            callback=callback,
        )
    except Exception as exc:  # noqa: BLE001 – результат повинен дійти до GUI за будь-яких умов
        logger.exception("optimization worker failed")
        result = _failed_result(optimizer, x0, f0, exc)
    results.put_nowait(result)


def start_opt_job(
    cfg: OptimizationConfig,
    *,
    engine: Optional[OptimizationEngine] = None,
    callback: Optional[IterationCallback] = None,
) -> OptJob:
    """
    Перевірити вхідні дані та запустити спуск у фоновому потоці.

    Синхронно (до запуску потоку) кидаються:
        ConfigError, ParseError, InvalidExpressionError,
        DimensionMismatchError (початкова точка),
        EvaluationError (f не обчислюється в початковій точці).

    callback викликається з робочого потоку.
    """
    cfg.validate()
    func = ParsedFunction(cfg.formula, cfg.num_vars)
    x0 = cfg.start_point()
    f0 = func.evaluate(x0)

    optimizer = AdaptiveGradientDescent(func=func, options=cfg.descent_options())
    cancel_token = CancellationToken()
    results: "queue.Queue[OptimizerResult]" = queue.Queue(maxsize=1)

    thread = threading.Thread(
        target=_run_worker,
        args=(
            engine or OptimizationEngine(),
            optimizer,
            x0.copy(),
            f0,
            int(cfg.max_iterations),
            cancel_token,
            results,
            callback,
        ),
        name="descent-worker",
        daemon=True,
    )
    job = OptJob(thread=thread, cancel_token=cancel_token, results=results)

    logger.info(
        "starting descent: f=%r n=%d x0=%s max_iter=%d",
        func.text,
        func.num_vars,
        x0.tolist(),
        cfg.max_iterations,
    )
    thread.start()
    return job


def stop_opt_job(job: OptJob) -> None:
    job.cancel_token.cancel()


def is_running(job: OptJob) -> bool:
    return job.thread.is_alive()


def poll_opt_job(job: OptJob) -> Optional[OptimizerResult]:
    if job.drained:
        return None
    try:
        result = job.results.get_nowait()
    except queue.Empty:
        return None
    job.drained = True
    return result


def wait_opt_job(job: OptJob, timeout: Optional[float] = None) -> Optional[OptimizerResult]:
    """Блокуючий варіант poll_opt_job; None, якщо минув timeout."""
    if job.drained:
        return None
    try:
        result = job.results.get(timeout=timeout)
    except queue.Empty:
        return None
    job.drained = True
    return result


__all__ = [
    "OptJob",
    "start_opt_job",
    "stop_opt_job",
    "is_running",
    "poll_opt_job",
    "wait_opt_job",
]
