"""
expression.py

Розбір та безпечне обчислення текстової цільової функції f(x1, ..., xn).

Ідея:
    - текст формули розбирається через sympy.parse_expr у виразі над
      змінними x1..xn (символ ^ означає степінь, як у звичайному записі);
    - у формулі доступні лише числа, змінні x1..xn, константи pi, E
      та обмежений набір елементарних функцій (див. FORMULA_FUNCTIONS);
    - перед eval у parse_expr токени формули проходять перевірку
      (_screen_tokens): рядки, атрибути, індекси, імена з "_" та ключові
      слова Python відкидаються як ParseError;
    - цілі літерали перетворюються на дійсні, а вираз розбирається з
      evaluate=False: sympy нічого не обчислює під час розбору, тож
      9^9^9 дає переповнення float при пробному обчисленні, а не
      нескінченну арифметику з великими цілими;
    - вираз компілюється один раз (sympy.lambdify, модуль math) і далі
      обчислюється у "гарячому" циклі оптимізації;
    - при створенні виконується пробне обчислення в точці (0, ..., 0):
      якщо воно не вдається, формула вважається некоректною одразу,
      а не при першому реальному виклику.

ParsedFunction не має змінного стану, тому один екземпляр можна
безпечно ділити між потоком GUI та робочим потоком оптимізації.
"""

from __future__ import annotations

import keyword
import math
from tokenize import ENDMARKER, NAME, NEWLINE, NL, NUMBER, OP
from typing import Any, Callable, Dict, List, Sequence, Tuple

import numpy as np
import sympy as sp
from sympy.core.function import AppliedUndef
from sympy.parsing.sympy_parser import (
    convert_xor,
    parse_expr,
    standard_transformations,
)

from .errors import (
    DimensionMismatchError,
    EvaluationError,
    InvalidExpressionError,
    ParseError,
)

# Функції та константи, доступні у тексті формули
FORMULA_FUNCTIONS: Dict[str, Any] = {
    "sin": sp.sin,
    "cos": sp.cos,
    "tan": sp.tan,
    "asin": sp.asin,
    "acos": sp.acos,
    "atan": sp.atan,
    "atan2": sp.atan2,
    "sinh": sp.sinh,
    "cosh": sp.cosh,
    "tanh": sp.tanh,
    "exp": sp.exp,
    "log": sp.log,
    "ln": sp.log,
    "sqrt": sp.sqrt,
    "abs": sp.Abs,
    "sign": sp.sign,
    "floor": sp.floor,
    "ceiling": sp.ceiling,
    "min": sp.Min,
    "max": sp.Max,
    "pi": sp.pi,
    "E": sp.E,
}

# Конструктори, які підставляють перетворення sympy (auto_symbol,
# auto_number, evaluate=False); з тексту формули вони недоступні
_PARSER_NAMES: Dict[str, Any] = {
    "Symbol": sp.Symbol,
    "Function": sp.Function,
    "Integer": sp.Integer,
    "Float": sp.Float,
    "Rational": sp.Rational,
    "Add": sp.Add,
    "Mul": sp.Mul,
    "Pow": sp.Pow,
}

_ALLOWED_OPS = frozenset({"+", "-", "*", "/", "**", "^", "(", ")", ","})

Token = Tuple[int, str]


def _screen_tokens(tokens: List[Token], local_dict: Dict[str, Any], global_dict: Dict[str, Any]) -> List[Token]:
    """
    Перше перетворення parse_expr: пропускає лише числа, імена та
    арифметичні оператори, цілі літерали переводить у дійсні.
    """
    result: List[Token] = []
    for toknum, tokval in tokens:
        if toknum == NUMBER:
            lowered = tokval.lower()
            if lowered.startswith(("0x", "0o", "0b")) or "_" in tokval:
                raise ParseError(f"непідтримуваний запис числа {tokval!r}")
            if not any(c in lowered for c in ".ej"):
                tokval += ".0"
        elif toknum == NAME:
            if tokval.startswith("_") or keyword.iskeyword(tokval) or tokval in _PARSER_NAMES:
                raise ParseError(f"недопустиме ім'я {tokval!r}")
        elif toknum == OP:
            if tokval not in _ALLOWED_OPS:
                raise ParseError(f"недопустимий символ {tokval!r}")
        elif toknum not in (NEWLINE, NL, ENDMARKER):
            raise ParseError(f"недопустимий фрагмент {tokval!r}")
        result.append((toknum, tokval))
    return result


_TRANSFORMATIONS = (_screen_tokens,) + standard_transformations + (convert_xor,)


def variable_names(num_vars: int) -> List[str]:
    """Імена змінних x1..xn."""
    return [f"x{i}" for i in range(1, num_vars + 1)]


def _formula_namespace() -> Dict[str, Any]:
    namespace: Dict[str, Any] = {"__builtins__": {}}
    namespace.update(_PARSER_NAMES)
    namespace.update(FORMULA_FUNCTIONS)
    return namespace


class ParsedFunction:
    """
    Розібрана та перевірена цільова функція n змінних.

    Використання:
        f = ParsedFunction("x1^2 + x2^2", 2)
        f.evaluate(np.array([1.0, 2.0]))  # 5.0

    Помилки конструктора:
        DimensionMismatchError  – n < 1;
        ParseError              – текст не є коректним виразом;
        InvalidExpressionError  – вираз містить невідомі імена / функції
                                  або не обчислюється в точці (0, ..., 0).
    """

    def __init__(self, text: str, num_vars: int) -> None:
        num_vars = int(num_vars)
        if num_vars < 1:
            raise DimensionMismatchError(
                expected=1,
                got=num_vars,
                message=f"Кількість змінних повинна бути >= 1, отримано {num_vars}",
            )
        if not text or not text.strip():
            raise ParseError("порожній вираз")

        self._text = text.strip()
        self._num_vars = num_vars
        self._symbols = sp.symbols(variable_names(num_vars))

        local_dict = {str(s): s for s in self._symbols}
        try:
            expr = parse_expr(
                self._text,
                local_dict=local_dict,
                global_dict=_formula_namespace(),
                transformations=_TRANSFORMATIONS,
                evaluate=False,
            )
        except ParseError:
            raise
        except Exception as exc:  # noqa: BLE001 – parse_expr кидає винятки різних типів
            raise ParseError(str(exc) or exc.__class__.__name__) from exc

        self._expr = self._check_expression(expr)
        self._func: Callable[..., Any] = sp.lambdify(
            self._symbols, self._expr, modules="math"
        )

        # Пробне обчислення в нулі
        try:
            self.evaluate(np.zeros(num_vars))
        except EvaluationError as exc:
            raise InvalidExpressionError(
                f"Вираз не обчислюється в точці (0, ..., 0): {exc}"
            ) from exc

    # ------------------------------------------------------------------
    # Перевірки розібраного виразу
    # ------------------------------------------------------------------

    def _check_expression(self, expr: Any) -> sp.Expr:
        if not isinstance(expr, sp.Expr):
            raise InvalidExpressionError(
                f"Вираз повинен бути скалярним, отримано: {type(expr).__name__}"
            )

        undefined = sorted(str(f.func) for f in expr.atoms(AppliedUndef))
        if undefined:
            raise InvalidExpressionError(
                f"Невідомі функції у виразі: {', '.join(undefined)}"
            )

        unknown = sorted(str(s) for s in expr.free_symbols - set(self._symbols))
        if unknown:
            raise InvalidExpressionError(
                f"Невідомі змінні у виразі: {', '.join(unknown)} "
                f"(допустимі x1..x{self._num_vars})"
            )
        return expr

    # ------------------------------------------------------------------
    # Властивості
    # ------------------------------------------------------------------

    @property
    def text(self) -> str:
        return self._text

    @property
    def num_vars(self) -> int:
        return self._num_vars

    @property
    def expression(self) -> sp.Expr:
        return self._expr

    # ------------------------------------------------------------------
    # Обчислення
    # ------------------------------------------------------------------

    def evaluate(self, point: Sequence[float]) -> float:
        """
        Обчислити f(point), де x_i = point[i-1].

        DimensionMismatchError – якщо len(point) != n (без обрізання / доповнення);
        EvaluationError        – ділення на нуль, вихід за область визначення,
                                 переповнення, комплексний або нескінченний результат.
        """
        arr = np.asarray(point, dtype=float)
        if arr.ndim != 1 or arr.shape[0] != self._num_vars:
            raise DimensionMismatchError(expected=self._num_vars, got=int(arr.size))

        # Прив'язуємо звичайні float: ділення на numpy.float64(0) дає inf, а не виняток
        values = [float(v) for v in arr]
        try:
            raw = self._func(*values)
        except (ArithmeticError, ValueError, TypeError) as exc:
            raise EvaluationError(str(exc) or exc.__class__.__name__) from exc

        try:
            value = float(raw)
        except TypeError as exc:
            raise EvaluationError(f"результат не є дійсним числом: {raw!r}") from exc

        if not math.isfinite(value):
            raise EvaluationError(f"результат не є скінченним: {value}")
        return value

    __call__ = evaluate

    def __repr__(self) -> str:
        return f"ParsedFunction({self._text!r}, {self._num_vars})"


def parse_function(text: str, num_vars: int) -> ParsedFunction:
    """Розібрати формулу; еквівалентно ParsedFunction(text, num_vars)."""
    return ParsedFunction(text, num_vars)


__all__ = [
    "FORMULA_FUNCTIONS",
    "ParsedFunction",
    "parse_function",
    "variable_names",
]
