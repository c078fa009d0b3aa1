"""Expression parsing, evaluation and symbolic differentiation on sympy.

Expressions are typed by users as plain strings such as ``x^2 + 2y`` or
``sqrt(1 - x^2)``.  They are parsed once into a sympy tree, checked against
the variables the caller allows, and compiled with ``lambdify`` into a
callable over the ``math`` module so the integration loops only pay for a
Python function call per sample.
"""

from __future__ import annotations

import logging
import math
from functools import lru_cache
from tokenize import TokenError
from typing import Callable, Mapping, Optional, Sequence, Tuple

import sympy as sp
from sympy.parsing.sympy_parser import (
    convert_xor,
    implicit_multiplication,
    parse_expr,
    standard_transformations,
)

logger = logging.getLogger(__name__)

X, Y = sp.symbols("x y", real=True)
VARIABLES = {"x": X, "y": Y}

SAFE_LOCALS = {
    "x": X,
    "y": Y,
    "pi": sp.pi, "e": sp.E, "E": sp.E,
    "sin": sp.sin, "cos": sp.cos, "tan": sp.tan,
    "asin": sp.asin, "acos": sp.acos, "atan": sp.atan,
    "sinh": sp.sinh, "cosh": sp.cosh, "tanh": sp.tanh,
    "sqrt": sp.sqrt, "exp": sp.exp, "log": sp.log, "ln": sp.log,
    "abs": sp.Abs, "sign": sp.sign,
}

_TRANSFORMATIONS = standard_transformations + (implicit_multiplication, convert_xor)


def _symbol(name: str) -> sp.Symbol:
    return VARIABLES.get(name) or sp.Symbol(name)


class ExpressionError(ValueError):
    """Raised when an expression string cannot be parsed or uses unknown names."""


@lru_cache(maxsize=256)
def parse_expression(expression: str) -> sp.Expr:
    text = (expression or "").strip()
    if not text:
        raise ExpressionError("Empty expression.")
    try:
        parsed = parse_expr(text, local_dict=dict(SAFE_LOCALS), transformations=_TRANSFORMATIONS)
    except (SyntaxError, TypeError, ValueError, AttributeError, NameError, TokenError) as exc:
        raise ExpressionError(f"Invalid expression {text!r}: {exc}") from exc
    if not isinstance(parsed, sp.Expr):
        raise ExpressionError(f"Invalid expression {text!r}: not an arithmetic expression.")
    return parsed


def _coerce_number(value) -> Optional[float]:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


class CompiledExpression:
    """A parsed expression bound to an ordered tuple of variable names."""

    def __init__(self, source: str, variables: Sequence[str] = ("x", "y")) -> None:
        self.source = source
        self.variables: Tuple[str, ...] = tuple(variables)
        self.expr = parse_expression(source)
        allowed = {_symbol(name) for name in self.variables}
        unknown = self.expr.free_symbols - allowed
        if unknown:
            names = ", ".join(sorted(str(sym) for sym in unknown))
            raise ExpressionError(f"Unknown variable(s) in {source!r}: {names}")
        self._func: Callable[..., object] = sp.lambdify(
            [_symbol(name) for name in self.variables], self.expr, modules="math"
        )

    def __call__(self, *args: float) -> Optional[float]:
        """Evaluate at positional values; ``None`` means non-numeric."""
        try:
            value = self._func(*args)
        except (ValueError, ZeroDivisionError, OverflowError, TypeError):
            return None
        return _coerce_number(value)

    def evaluate(self, bindings: Mapping[str, float]) -> Optional[float]:
        return self(*(bindings.get(name, 0.0) for name in self.variables))

    def __repr__(self) -> str:
        return f"CompiledExpression({self.source!r}, variables={self.variables!r})"


def compile_expression(expression: str, variables: Sequence[str] = ("x", "y")) -> CompiledExpression:
    return CompiledExpression(expression, variables)


def evaluate(expression: str, bindings: Mapping[str, float]) -> Optional[float]:
    """Evaluate ``expression`` with ``bindings``; ``None`` if the value is not a finite real."""
    compiled = compile_expression(expression, tuple(sorted(bindings)))
    return compiled.evaluate(bindings)


def differentiate(expression: str, with_respect_to: str) -> str:
    """Return the partial derivative of ``expression`` as a re-parseable string."""
    derivative = sp.diff(parse_expression(expression), _symbol(with_respect_to))
    logger.debug("d/d%s [%s] = %s", with_respect_to, expression, derivative)
    return str(derivative)

