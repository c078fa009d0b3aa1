"""Stateful caller around :func:`green_calculator.engine.integrate`.

The session owns what a form would own: the current input fields, the last
successful result, the last error message and the last graph snapshot.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import asdict, dataclass, field, replace
from typing import Any, Dict, Optional

from . import config
from .engine import (
    BoundaryCurves,
    CalculationResult,
    FieldExpressions,
    IntegrationMode,
    Range,
    Success,
    integrate,
)
from .graph_engine import GraphSnapshot

logger = logging.getLogger(__name__)


@dataclass
class CalculationForm:
    mode: IntegrationMode = IntegrationMode(config.DEFAULT_MODE)
    field_p: str = ""
    field_q: str = ""
    curve_lower: str = ""
    curve_upper: str = ""
    x_min: float = config.INITIAL_X_RANGE["min"]
    x_max: float = config.INITIAL_X_RANGE["max"]

    def request(self):
        return (
            self.mode,
            FieldExpressions(q=self.field_q, p=self.field_p),
            BoundaryCurves(lower=self.curve_lower, upper=self.curve_upper),
            Range(min=float(self.x_min), max=float(self.x_max)),
        )

    def cleared(self) -> "CalculationForm":
        form = replace(
            self,
            field_q="",
            curve_lower="",
            curve_upper="",
            x_min=config.RESET_X_RANGE["min"],
            x_max=config.RESET_X_RANGE["max"],
        )
        if self.mode is IntegrationMode.VECTOR_FIELD:
            form.field_p = ""
        return form

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["mode"] = self.mode.value
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "CalculationForm":
        form = cls()
        if not isinstance(data, dict):
            return form
        try:
            form.mode = IntegrationMode(data.get("mode", form.mode))
        except ValueError:
            pass
        for name in ("field_p", "field_q", "curve_lower", "curve_upper"):
            value = data.get(name)
            if isinstance(value, str):
                setattr(form, name, value)
        for name in ("x_min", "x_max"):
            try:
                setattr(form, name, float(data[name]))
            except (KeyError, TypeError, ValueError):
                pass
        return form


@dataclass
class CalculatorSession:
    form: CalculationForm = field(default_factory=CalculationForm)
    step: float = config.STEP
    last_result: Optional[Success] = None
    last_error: Optional[str] = None
    snapshot: Optional[GraphSnapshot] = None
    _cancel_event: Optional[threading.Event] = field(default=None, repr=False, compare=False)

    def apply(self, result: CalculationResult, form: CalculationForm) -> CalculationResult:
        if isinstance(result, Success):
            self.last_result = result
            self.last_error = None
            self.snapshot = GraphSnapshot(
                curve_lower=form.curve_lower,
                curve_upper=form.curve_upper,
                x_min=float(form.x_min),
                x_max=float(form.x_max),
            )
            self.form = form.cleared()
        else:
            self.last_error = result.message
        return result

    def calculate(self, cancel_event: Optional[threading.Event] = None) -> CalculationResult:
        """Run one calculation; each run gets its own cancellation token."""
        self.last_error = None
        if cancel_event is None:
            cancel_event = threading.Event()
        self._cancel_event = cancel_event
        form = replace(self.form)
        mode, fields, curves, x_range = form.request()
        result = integrate(mode, fields, curves, x_range, self.step, cancel_event=cancel_event)
        return self.apply(result, form)

    def calculate_in_background(self, executor: ThreadPoolExecutor) -> "Future[CalculationResult]":
        """Run :meth:`calculate` on ``executor``; :meth:`cancel` stops it between rows."""
        cancel_event = threading.Event()
        self._cancel_event = cancel_event
        return executor.submit(self.calculate, cancel_event)

    def cancel(self) -> None:
        logger.info("Cancellation requested")
        if self._cancel_event is not None:
            self._cancel_event.set()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "form": self.form.to_dict(),
            "last_result": None if self.last_result is None else {
                "value": self.last_result.value,
                "expression_label": self.last_result.expression_label,
            },
            "last_error": self.last_error,
            "snapshot": None if self.snapshot is None else self.snapshot.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "CalculatorSession":
        session = cls()
        if not isinstance(data, dict):
            return session
        session.form = CalculationForm.from_dict(data.get("form"))
        raw_result = data.get("last_result")
        if isinstance(raw_result, dict):
            try:
                session.last_result = Success(
                    value=float(raw_result["value"]),
                    expression_label=str(raw_result["expression_label"]),
                )
            except (KeyError, TypeError, ValueError):
                session.last_result = None
        error = data.get("last_error")
        session.last_error = error if isinstance(error, str) else None
        session.snapshot = GraphSnapshot.from_dict(data.get("snapshot"))
        return session
