import threading

import numpy as np
import pytest

from descentAPP.core.config import OptimizationConfig
from descentAPP.core.engine import OptimizationEngine
from descentAPP.core.errors import (
    ConfigError,
    DimensionMismatchError,
    EvaluationError,
    InvalidExpressionError,
    ParseError,
)
from descentAPP.core.iteration_result import IterationResult
from descentAPP.core.opt_job import (
    is_running,
    poll_opt_job,
    start_opt_job,
    stop_opt_job,
    wait_opt_job,
)

TIMEOUT = 30.0


class _BlockingCallback:
    """Тримає робочий потік на початковому записі, доки тест не відпустить."""

    def __init__(self) -> None:
        self.started = threading.Event()
        self.release = threading.Event()

    def __call__(self, rec: IterationResult) -> None:
        if rec.index == 0:
            self.started.set()
            self.release.wait(TIMEOUT)


def test_default_run_delivers_single_result() -> None:
    job = start_opt_job(OptimizationConfig())

    result = wait_opt_job(job, timeout=TIMEOUT)

    assert result is not None
    assert not result.terminated_early
    assert np.allclose(result.x, [0.0, 0.0], atol=1e-3)
    assert abs(result.f_x) < 1e-6
    assert poll_opt_job(job) is None
    assert wait_opt_job(job, timeout=0.01) is None


def test_poll_is_non_blocking_until_finished() -> None:
    gate = _BlockingCallback()
    job = start_opt_job(OptimizationConfig(), callback=gate)
    assert gate.started.wait(TIMEOUT)

    assert poll_opt_job(job) is None
    assert is_running(job)

    gate.release.set()
    assert wait_opt_job(job, timeout=TIMEOUT) is not None


def test_stop_request_terminates_early() -> None:
    gate = _BlockingCallback()
    cfg = OptimizationConfig(
        formula="100 * (x2 - x1^2)^2 + (1 - x1)^2",
        x0="-1.2, 1",
        max_iterations=100000,
    )
    job = start_opt_job(cfg, callback=gate)
    assert gate.started.wait(TIMEOUT)

    stop_opt_job(job)
    stop_opt_job(job)
    gate.release.set()
    result = wait_opt_job(job, timeout=TIMEOUT)

    assert result is not None
    assert result.terminated_early
    assert result.stopped_by == "cancelled"
    assert result.iterations == 0
    assert len(result.history) == 1


def test_stop_after_finish_is_noop() -> None:
    job = start_opt_job(OptimizationConfig())
    result = wait_opt_job(job, timeout=TIMEOUT)
    job.thread.join(TIMEOUT)

    stop_opt_job(job)

    assert result is not None
    assert not result.terminated_early
    assert not is_running(job)


def test_each_job_gets_fresh_token_and_channel() -> None:
    first = start_opt_job(OptimizationConfig())
    stop_opt_job(first)
    second = start_opt_job(OptimizationConfig())

    assert first.cancel_token is not second.cancel_token
    assert first.results is not second.results
    assert not second.cancel_token.is_cancelled()
    assert wait_opt_job(first, timeout=TIMEOUT) is not None
    assert wait_opt_job(second, timeout=TIMEOUT) is not None


@pytest.mark.parametrize(
    ("cfg", "error"),
    [
        (OptimizationConfig(formula="x1 +"), ParseError),
        (OptimizationConfig(formula="x1 + z"), InvalidExpressionError),
        (OptimizationConfig(x0="1, 2, 3"), DimensionMismatchError),
        (OptimizationConfig(formula="1/(x1 - 2) + x2", x0="2, 2"), EvaluationError),
        (OptimizationConfig(step_decay=1.5), ConfigError),
        (OptimizationConfig(num_vars="2"), ConfigError),
        (OptimizationConfig(formula="x1 + x2.__class__"), ParseError),
        (OptimizationConfig(formula="x1 + x2 + 9^9^9"), InvalidExpressionError),
    ],
)
def test_construction_errors_are_synchronous(cfg: OptimizationConfig, error: type) -> None:
    before = {t.name for t in threading.enumerate()}
    with pytest.raises(error):
        start_opt_job(cfg)
    after = [t for t in threading.enumerate() if t.name not in before]
    assert not any(t.name == "descent-worker" for t in after)


class _BrokenEngine(OptimizationEngine):
    def run(self, optimizer, x0, max_iter=None, cancel_token=None, callback=None):
        raise RuntimeError("boom")


def test_unexpected_worker_failure_still_delivers_result() -> None:
    job = start_opt_job(OptimizationConfig(), engine=_BrokenEngine())

    result = wait_opt_job(job, timeout=TIMEOUT)

    assert result is not None
    assert result.stopped_by == "error"
    assert isinstance(result.error, RuntimeError)
    assert result.history == [(2.0, 2.0, 8.0)]
