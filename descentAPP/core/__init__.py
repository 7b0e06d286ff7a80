from .adaptive_descent import AdaptiveGradientDescent
from .cancellation import CancellationToken
from .config import OptimizationConfig, parse_point
from .engine import OptimizationEngine, OptimizerResult
from .errors import (
    ConfigError,
    DimensionMismatchError,
    EvaluationError,
    InvalidExpressionError,
    ParseError,
    ParserError,
    RunInProgressError,
)
from .expression import ParsedFunction, parse_function
from .functions import FUNCTIONS, numerical_gradient
from .opt_job import OptJob, poll_opt_job, start_opt_job, stop_opt_job, wait_opt_job

__all__ = [
    "AdaptiveGradientDescent",
    "CancellationToken",
    "OptimizationConfig",
    "parse_point",
    "OptimizationEngine",
    "OptimizerResult",
    "ConfigError",
    "DimensionMismatchError",
    "EvaluationError",
    "InvalidExpressionError",
    "ParseError",
    "ParserError",
    "RunInProgressError",
    "ParsedFunction",
    "parse_function",
    "FUNCTIONS",
    "numerical_gradient",
    "OptJob",
    "poll_opt_job",
    "start_opt_job",
    "stop_opt_job",
    "wait_opt_job",
]
