"""
errors.py

Ієрархія помилок ядра оптимізації.

    ParserError
        ├── ParseError              – текст формули синтаксично некоректний;
        ├── InvalidExpressionError  – формула розібрана, але не обчислюється
        │                             навіть у пробній точці (0, ..., 0);
        ├── DimensionMismatchError  – довжина точки не дорівнює n;
        └── EvaluationError         – помилка області визначення в конкретній
                                      точці (ділення на нуль, log(-1), ...).

    ConfigError         – некоректні числові параметри запуску.
    RunInProgressError  – спроба запустити другий прогін у тій самій сесії.
"""

from __future__ import annotations

from typing import Optional


class ParserError(Exception):
    """Базовий клас для помилок розбору та обчислення формули."""


class ParseError(ParserError):
    def __init__(self, message: str) -> None:
        super().__init__(f"Помилка парсингу виразу: {message}")


class InvalidExpressionError(ParserError):
    def __init__(self, message: str = "Вираз містить недопустимі символи") -> None:
        super().__init__(message)


class DimensionMismatchError(ParserError):
    def __init__(self, expected: int, got: int, message: Optional[str] = None) -> None:
        self.expected = expected
        self.got = got
        super().__init__(
            message
            or f"Невірна розмірність точки: очікується {expected}, отримано {got}"
        )


class EvaluationError(ParserError):
    def __init__(self, message: str) -> None:
        super().__init__(f"Помилка обчислення: {message}")


class ConfigError(ValueError):
    """Некоректні параметри запуску оптимізації."""


class RunInProgressError(RuntimeError):
    """У сесії вже виконується оптимізація."""


__all__ = [
    "ParserError",
    "ParseError",
    "InvalidExpressionError",
    "DimensionMismatchError",
    "EvaluationError",
    "ConfigError",
    "RunInProgressError",
]
