"""Tests for the stateful calculator session."""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from green_calculator import config
from green_calculator.engine import FailureKind, IntegrationMode
from green_calculator.graph_engine import GraphSnapshot
from green_calculator.session import CalculationForm, CalculatorSession


def _direct_session(**overrides):
    values = dict(field_q="2", curve_lower="0", curve_upper="1", x_min=0.0, x_max=1.0)
    values.update(overrides)
    return CalculatorSession(form=CalculationForm(mode=IntegrationMode.DIRECT_INTEGRAND, **values))


class TestInitialState:
    def test_defaults(self):
        session = CalculatorSession()
        assert session.form.mode is IntegrationMode.DIRECT_INTEGRAND
        assert session.form.x_min == config.INITIAL_X_RANGE["min"]
        assert session.form.x_max == config.INITIAL_X_RANGE["max"]
        assert session.last_result is None
        assert session.snapshot is None
        assert session.step == config.STEP


class TestCalculate:
    """Success updates result and snapshot and resets the form."""

    def test_success_stores_result_and_snapshot(self):
        session = _direct_session(field_p="kept")
        result = session.calculate()
        assert result.ok
        assert session.last_result == result
        assert session.last_error is None
        assert session.snapshot == GraphSnapshot("0", "1", 0.0, 1.0)

    def test_success_resets_form(self):
        """Test that direct mode clears Q, curves and x-range but not P."""
        session = _direct_session(field_p="kept", x_min=-1.0, x_max=3.0)
        session.calculate()
        form = session.form
        assert form.mode is IntegrationMode.DIRECT_INTEGRAND
        assert form.field_q == ""
        assert form.field_p == "kept"
        assert (form.curve_lower, form.curve_upper) == ("", "")
        assert (form.x_min, form.x_max) == (config.RESET_X_RANGE["min"], config.RESET_X_RANGE["max"])

    def test_vector_mode_clears_both_fields(self):
        session = CalculatorSession(
            form=CalculationForm(
                mode=IntegrationMode.VECTOR_FIELD,
                field_p="-y",
                field_q="x",
                curve_lower="0",
                curve_upper="1",
                x_min=0.0,
                x_max=1.0,
            )
        )
        assert session.calculate().ok
        assert session.form.field_p == ""
        assert session.form.field_q == ""
        assert session.form.mode is IntegrationMode.VECTOR_FIELD

    def test_failure_keeps_previous_state(self):
        """Test that a failed calculation leaves the last success and snapshot alone."""
        session = _direct_session()
        first = session.calculate()
        snapshot = session.snapshot

        session.form = CalculationForm(field_q="1", curve_lower="sqrt(-1-x^2)", curve_upper="1", x_min=0, x_max=1)
        failed = session.calculate()

        assert failed.kind is FailureKind.INVALID_BOUND
        assert session.last_error == failed.message
        assert session.last_result == first
        assert session.snapshot == snapshot
        assert session.form.curve_lower == "sqrt(-1-x^2)"

    def test_success_clears_previous_error(self):
        session = _direct_session(field_q="")
        assert session.calculate().kind is FailureKind.MISSING_INPUT
        assert session.last_error == config.MSG_MISSING_INPUT
        session.form = _direct_session().form
        assert session.calculate().ok
        assert session.last_error is None


class TestCancellation:
    def test_cancel_stops_run_with_that_token(self):
        session = _direct_session()
        event = threading.Event()
        event.set()
        assert session.calculate(cancel_event=event).kind is FailureKind.CANCELLED
        assert session.snapshot is None
        assert session.calculate().ok

    def test_cancel_after_run_does_not_leak(self):
        """Test that a late cancel leaves the next calculation untouched."""
        session = _direct_session()
        assert session.calculate().ok
        session.cancel()
        session.form = _direct_session().form
        assert session.calculate().ok

    def test_cancel_before_any_run(self):
        session = _direct_session()
        session.cancel()
        assert session.calculate().ok

    def test_background_calculation(self):
        session = _direct_session()
        with ThreadPoolExecutor(max_workers=1) as executor:
            future = session.calculate_in_background(executor)
            result = future.result(timeout=60)
        assert result.ok
        assert result.value == pytest.approx(2.0, abs=0.05)
        assert session.snapshot is not None


class TestSerialization:
    def test_round_trip(self):
        session = _direct_session()
        session.calculate()
        restored = CalculatorSession.from_dict(session.to_dict())
        assert restored.form == session.form
        assert restored.last_result == session.last_result
        assert restored.snapshot == session.snapshot
        assert restored.last_error is None

    def test_from_garbage(self):
        restored = CalculatorSession.from_dict({"form": {"mode": "bogus", "x_min": "abc"}, "last_result": {}})
        assert restored.form.mode is IntegrationMode.DIRECT_INTEGRAND
        assert restored.form.x_min == config.INITIAL_X_RANGE["min"]
        assert restored.last_result is None
        assert CalculatorSession.from_dict(None).snapshot is None

    def test_form_to_dict_uses_mode_value(self):
        data = CalculationForm(mode=IntegrationMode.VECTOR_FIELD).to_dict()
        assert data["mode"] == "vector"
        assert CalculationForm.from_dict(data).mode is IntegrationMode.VECTOR_FIELD
