import time
import uuid

import streamlit as st
import streamlit_shadcn_ui as ui

from green_calculator import config, graph_engine, logger as event_log
from green_calculator.engine import IntegrationMode
from green_calculator.logging_config import setup_logging
from green_calculator.session import CalculationForm, CalculatorSession
from green_calculator.ui_components import field_inputs, limit_inputs, mode_selector
from green_calculator.verbal_descriptions import describe_mode, describe_result

st.set_page_config(page_title="Green's Theorem Calculator", layout="wide")

if "logging_ready" not in st.session_state:
    setup_logging()
    st.session_state["logging_ready"] = True

st.title("Green's Theorem Calculator")
st.caption("Double integrals over the region between two curves, computed with a fixed-step Riemann sum.")

_MODE_LABELS = config.MODE_OPTIONS

if "calculator" not in st.session_state:
    st.session_state["calculator"] = CalculatorSession()
if "session_id" not in st.session_state:
    st.session_state["session_id"] = uuid.uuid4().hex


def _push_form_to_widgets(form: CalculationForm):
    st.session_state["form_mode"] = _MODE_LABELS[form.mode.value]
    st.session_state["form_field_p"] = form.field_p
    st.session_state["form_field_q"] = form.field_q
    st.session_state["form_curve_lower"] = form.curve_lower
    st.session_state["form_curve_upper"] = form.curve_upper
    st.session_state["form_x_min"] = float(form.x_min)
    st.session_state["form_x_max"] = float(form.x_max)


def _read_form_from_widgets() -> CalculationForm:
    label = st.session_state.get("form_mode", _MODE_LABELS[config.DEFAULT_MODE])
    mode = next(key for key, text in _MODE_LABELS.items() if text == label)
    return CalculationForm(
        mode=IntegrationMode(mode),
        field_p=st.session_state.get("form_field_p", ""),
        field_q=st.session_state.get("form_field_q", ""),
        curve_lower=st.session_state.get("form_curve_lower", ""),
        curve_upper=st.session_state.get("form_curve_upper", ""),
        x_min=st.session_state.get("form_x_min", config.INITIAL_X_RANGE["min"]),
        x_max=st.session_state.get("form_x_max", config.INITIAL_X_RANGE["max"]),
    )


def _on_calculate():
    calculator: CalculatorSession = st.session_state["calculator"]
    calculator.form = _read_form_from_widgets()
    submitted = calculator.form
    started = time.monotonic()
    result = calculator.calculate()
    session_id = st.session_state["session_id"]
    event_log.log_calculation(
        session_id,
        event_log.calculation_record(session_id, submitted, result, step=calculator.step, started=started),
    )
    # Widgets only take new values before they are rendered, i.e. inside a callback
    _push_form_to_widgets(calculator.form)


if "form_mode" not in st.session_state:
    _push_form_to_widgets(st.session_state["calculator"].form)

calculator: CalculatorSession = st.session_state["calculator"]

left_col, right_col = st.columns([1, 2], gap="large")

with left_col:
    st.header("Inputs")
    mode = mode_selector()
    st.caption(describe_mode(mode))
    field_inputs(mode)
    limit_inputs()
    st.button("Calculate", type="primary", use_container_width=True, on_click=_on_calculate)

    st.subheader("Result")
    if calculator.last_error:
        st.error(calculator.last_error)
    if calculator.last_result is not None:
        ui.metric_card(
            title="Approximate value",
            content=calculator.last_result.formatted,
            description=f"step = {calculator.step}",
            key="result_card",
        )
        st.markdown(f"Integral: **{calculator.last_result.expression_label}**")
        st.caption(describe_result(calculator.last_result))
    elif not calculator.last_error:
        st.write(config.MSG_NO_RESULT)

with right_col:
    st.header(config.CHART_TITLE)
    if calculator.snapshot is None:
        st.caption("The bounding curves of the last successful calculation are drawn here.")
    else:
        fig = graph_engine.build_figure(calculator.snapshot)
        st.plotly_chart(fig, use_container_width=True, config={"displaylogo": False})
