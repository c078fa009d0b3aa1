"""Fixed-step double integration over a region bounded by two curves.

The region is ``x_min <= x <= x_max`` and, for each sampled ``x``,
``lower(x) <= y < upper(x)``.  Both loops advance by the same ``step`` and
every sample contributes ``value * step**2`` to the total.  In vector-field
mode the sample value is the curl term ``dQ/dx - dP/dy`` of Green's theorem.
"""

from __future__ import annotations

import enum
import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from . import config
from .expressions import CompiledExpression, compile_expression, differentiate

logger = logging.getLogger(__name__)


class IntegrationMode(str, enum.Enum):
    VECTOR_FIELD = "vector"
    DIRECT_INTEGRAND = "direct"


class FailureKind(str, enum.Enum):
    MISSING_INPUT = "missing_input"
    INVALID_BOUND = "invalid_bound"
    INVALID_INTEGRAND = "invalid_integrand"
    UNEXPECTED = "unexpected"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class FieldExpressions:
    q: str
    p: str = ""


@dataclass(frozen=True)
class BoundaryCurves:
    lower: str
    upper: str


@dataclass(frozen=True)
class Range:
    min: float
    max: float


@dataclass(frozen=True)
class Success:
    value: float
    expression_label: str

    ok = True

    @property
    def formatted(self) -> str:
        return f"{self.value:.{config.RESULT_DECIMALS}f}"

    def to_response(self) -> Dict[str, Any]:
        return {"result": self.formatted, "expression_label": self.expression_label}


@dataclass(frozen=True)
class Failure:
    kind: FailureKind
    message: str

    ok = False

    def to_response(self) -> Dict[str, Any]:
        return {"error": self.message}


CalculationResult = Union[Success, Failure]


def format_number(value: float) -> str:
    """Render a bound the way a user would type it: ``1`` rather than ``1.0``."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def _is_blank(text: Optional[str]) -> bool:
    return not text or not text.strip()


def missing_inputs(mode: IntegrationMode, fields: FieldExpressions, curves: BoundaryCurves) -> bool:
    if _is_blank(curves.lower) or _is_blank(curves.upper):
        return True
    if mode is IntegrationMode.VECTOR_FIELD:
        return _is_blank(fields.p) or _is_blank(fields.q)
    return _is_blank(fields.q)


def expression_label(
    mode: IntegrationMode, fields: FieldExpressions, curves: BoundaryCurves, x_range: Range
) -> str:
    bounds = {
        "x_min": format_number(x_range.min),
        "x_max": format_number(x_range.max),
        "lower": curves.lower,
        "upper": curves.upper,
    }
    if mode is IntegrationMode.VECTOR_FIELD:
        return config.VECTOR_FIELD_LABEL.format(**bounds)
    return config.DIRECT_INTEGRAND_LABEL.format(integrand=fields.q, **bounds)


class _CurlIntegrand:
    """dQ/dx - dP/dy, with both derivatives taken once per calculation."""

    def __init__(self, fields: FieldExpressions) -> None:
        self.dq_dx = compile_expression(differentiate(fields.q, "x"), config.INTEGRAND_VARIABLES)
        self.dp_dy = compile_expression(differentiate(fields.p, "y"), config.INTEGRAND_VARIABLES)

    def __call__(self, x: float, y: float) -> Optional[float]:
        dq_dx = self.dq_dx(x, y)
        dp_dy = self.dp_dy(x, y)
        if dq_dx is None or dp_dy is None:
            return None
        return dq_dx - dp_dy


def _build_integrand(mode: IntegrationMode, fields: FieldExpressions):
    if mode is IntegrationMode.VECTOR_FIELD:
        return _CurlIntegrand(fields)
    return compile_expression(fields.q, config.INTEGRAND_VARIABLES)


def _riemann_sum(
    integrand,
    lower: CompiledExpression,
    upper: CompiledExpression,
    x_range: Range,
    step: float,
    cancel_event: Optional[threading.Event],
) -> Union[float, Failure]:
    area = step * step
    total = 0.0
    x = x_range.min
    while x <= x_range.max:
        if cancel_event is not None and cancel_event.is_set():
            logger.info("Integration cancelled at x=%s", x)
            return Failure(FailureKind.CANCELLED, config.MSG_CANCELLED.format(x=format_number(x)))
        y_min = lower(x)
        y_max = upper(x)
        if y_min is None or y_max is None:
            return Failure(FailureKind.INVALID_BOUND, config.MSG_INVALID_BOUND.format(x=format_number(x)))
        y = y_min
        while y < y_max:
            value = integrand(x, y)
            if value is None:
                return Failure(
                    FailureKind.INVALID_INTEGRAND,
                    config.MSG_INVALID_INTEGRAND.format(x=format_number(x), y=format_number(y)),
                )
            total += value * area
            y += step
        x += step
    return total


def integrate(
    mode: IntegrationMode,
    fields: FieldExpressions,
    curves: BoundaryCurves,
    x_range: Range,
    step: float = config.STEP,
    *,
    cancel_event: Optional[threading.Event] = None,
) -> CalculationResult:
    """Approximate the double integral of the region between ``curves``.

    Args:
        mode: Integrate ``fields.q`` directly, or the curl of ``(P, Q)``.
        fields: Field expressions; ``p`` is only read in vector-field mode.
        curves: Lower and upper boundary expressions in ``x``.
        x_range: Outer integration range, sampled while ``x <= max``.
        step: Grid spacing used for both axes and the cell area.
        cancel_event: Optional token checked once per ``x`` row.

    Returns:
        ``Success`` with the total rounded to four decimals, or a ``Failure``
        describing the first problem encountered.
    """
    mode = IntegrationMode(mode)
    if missing_inputs(mode, fields, curves):
        return Failure(FailureKind.MISSING_INPUT, config.MSG_MISSING_INPUT)
    if step <= 0:
        raise ValueError(f"step must be positive, got {step!r}")

    try:
        integrand = _build_integrand(mode, fields)
        lower = compile_expression(curves.lower, config.CURVE_VARIABLES)
        upper = compile_expression(curves.upper, config.CURVE_VARIABLES)
        outcome = _riemann_sum(integrand, lower, upper, x_range, step, cancel_event)
    except Exception:
        logger.exception("Calculation failed for mode=%s fields=%s curves=%s", mode.value, fields, curves)
        return Failure(FailureKind.UNEXPECTED, config.MSG_UNEXPECTED)

    if isinstance(outcome, Failure):
        logger.info("Calculation aborted (%s): %s", outcome.kind.value, outcome.message)
        return outcome

    value = round(outcome, config.RESULT_DECIMALS)
    if value == 0:
        value = 0.0
    label = expression_label(mode, fields, curves, x_range)
    logger.debug("Integral %s = %s", label, value)
    return Success(value=value, expression_label=label)
