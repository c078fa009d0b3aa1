"""Dash front end for the Green's theorem calculator."""

from __future__ import annotations

import time
import uuid
from typing import Any, Dict, Optional

import dash
from dash import Input, Output, State, dcc, html

from green_calculator import config, graph_engine, logger as event_log
from green_calculator.engine import IntegrationMode
from green_calculator.logging_config import setup_logging
from green_calculator.session import CalculationForm, CalculatorSession
from green_calculator.verbal_descriptions import describe_mode, describe_result

_FIELD_STYLE: Dict[str, Any] = {"width": "100%", "height": "36px", "marginTop": "4px"}
_LABEL_STYLE: Dict[str, Any] = {"display": "block", "fontWeight": 600, "marginBottom": "12px"}
_ERROR_STYLE: Dict[str, Any] = {"color": "#d62728", "whiteSpace": "pre-wrap"}


def _get_session_id(session_data: Optional[Dict[str, Any]]) -> str:
    if isinstance(session_data, dict):
        raw = session_data.get("session_id")
        if isinstance(raw, str) and raw:
            return raw
    return "unknown"


def _labeled_input(label: str, input_id: str, *, value: Any, input_type: str = "text", placeholder: str = "") -> html.Label:
    return html.Label(
        [
            label,
            dcc.Input(
                id=input_id,
                type=input_type,
                value=value,
                placeholder=placeholder,
                debounce=False,
                style=_FIELD_STYLE,
            ),
        ],
        htmlFor=input_id,
        style=_LABEL_STYLE,
    )


def _field_p_style(mode: Optional[str]) -> Dict[str, Any]:
    style = dict(_LABEL_STYLE)
    if mode != IntegrationMode.VECTOR_FIELD.value:
        style["display"] = "none"
    return style


def _field_q_label(mode: Optional[str]) -> str:
    if mode == IntegrationMode.VECTOR_FIELD.value:
        return "Component Q(x, y)"
    return "Function to integrate"


def _render_result(session: CalculatorSession):
    children = []
    if session.last_error:
        children.append(html.P(session.last_error, style=_ERROR_STYLE))
    if session.last_result is not None:
        children.append(html.P(session.last_result.formatted, style={"fontSize": "1.5rem"}))
        children.append(html.P(["Integral: ", html.Strong(session.last_result.expression_label)]))
        children.append(html.P(describe_result(session.last_result), className="result-description"))
    elif not session.last_error:
        children.append(html.P(config.MSG_NO_RESULT))
    return children


def _serve_layout() -> html.Div:
    session = CalculatorSession()
    form = session.form
    return html.Div(
        [
            dcc.Store(id="store-session", data={"session_id": uuid.uuid4().hex}, storage_type="session"),
            dcc.Store(id="store-calculator", data=session.to_dict()),
            dcc.Download(id="download-jsonl"),
            dcc.Download(id="download-csv"),
            html.Div(
                [
                    html.H1("Green's Theorem Calculator"),
                    html.Label(
                        [
                            "Select the case",
                            dcc.Dropdown(
                                id="input-mode",
                                options=[{"label": text, "value": key} for key, text in config.MODE_OPTIONS.items()],
                                value=form.mode.value,
                                clearable=False,
                            ),
                        ],
                        style=_LABEL_STYLE,
                    ),
                    html.P(describe_mode(form.mode), id="mode-description", style={"color": "#555555"}),
                    html.Div(
                        _labeled_input(
                            "Component P(x, y)", "input-field-p", value=form.field_p,
                            placeholder=config.PLACEHOLDERS["field_p"],
                        ),
                        id="field-p-row",
                        style=_field_p_style(form.mode.value),
                    ),
                    html.Label(
                        [
                            html.Span(_field_q_label(form.mode.value), id="field-q-label"),
                            dcc.Input(
                                id="input-field-q",
                                type="text",
                                value=form.field_q,
                                placeholder=config.PLACEHOLDERS["integrand"],
                                style=_FIELD_STYLE,
                            ),
                        ],
                        htmlFor="input-field-q",
                        style=_LABEL_STYLE,
                    ),
                    _labeled_input(
                        "Lower curve (in y)", "input-curve-lower", value=form.curve_lower,
                        placeholder=config.PLACEHOLDERS["curve_lower"],
                    ),
                    _labeled_input(
                        "Upper curve (in y)", "input-curve-upper", value=form.curve_upper,
                        placeholder=config.PLACEHOLDERS["curve_upper"],
                    ),
                    _labeled_input("x minimum", "input-x-min", value=form.x_min, input_type="number"),
                    _labeled_input("x maximum", "input-x-max", value=form.x_max, input_type="number"),
                    html.Button("Calculate", id="btn-calculate", n_clicks=0, type="button"),
                    html.H2("Result"),
                    html.Div(_render_result(session), id="result-display"),
                    html.Div(
                        [
                            html.Button("Download log (JSONL)", id="btn-download-jsonl", n_clicks=0, type="button"),
                            html.Button(
                                "Download log (CSV)", id="btn-download-csv", n_clicks=0, type="button",
                                style={"marginLeft": "8px"},
                            ),
                        ],
                        style={"marginTop": "16px"},
                    ),
                ],
                style={"flex": "1", "minWidth": "280px", "maxWidth": "420px", "padding": "16px"},
            ),
            html.Div(
                [
                    html.H2(config.CHART_TITLE),
                    dcc.Graph(
                        id="bounds-graph",
                        figure=graph_engine.build_figure(None),
                        config={"displaylogo": False},
                    ),
                ],
                style={"flex": "2", "padding": "16px"},
            ),
        ],
        style={"display": "flex", "flexWrap": "wrap", "gap": "24px"},
    )


app = dash.Dash(__name__)
server = app.server
app.layout = _serve_layout


@app.callback(
    Output("field-p-row", "style"),
    Output("field-q-label", "children"),
    Output("input-field-q", "placeholder"),
    Output("mode-description", "children"),
    Input("input-mode", "value"),
)
def _sync_mode_fields(mode):
    placeholder = config.PLACEHOLDERS["field_q" if mode == IntegrationMode.VECTOR_FIELD.value else "integrand"]
    return _field_p_style(mode), _field_q_label(mode), placeholder, describe_mode(mode or config.DEFAULT_MODE)


@app.callback(
    [
        Output("store-calculator", "data"),
        Output("result-display", "children"),
        Output("bounds-graph", "figure"),
        Output("input-field-p", "value"),
        Output("input-field-q", "value"),
        Output("input-curve-lower", "value"),
        Output("input-curve-upper", "value"),
        Output("input-x-min", "value"),
        Output("input-x-max", "value"),
    ],
    Input("btn-calculate", "n_clicks"),
    [
        State("input-mode", "value"),
        State("input-field-p", "value"),
        State("input-field-q", "value"),
        State("input-curve-lower", "value"),
        State("input-curve-upper", "value"),
        State("input-x-min", "value"),
        State("input-x-max", "value"),
        State("store-calculator", "data"),
        State("store-session", "data"),
    ],
    prevent_initial_call=True,
)
def _handle_calculate(n_clicks, mode, field_p, field_q, curve_lower, curve_upper, x_min, x_max, calculator_data, session_data):
    if not n_clicks:
        return (dash.no_update,) * 9
    session = CalculatorSession.from_dict(calculator_data)
    session.form = CalculationForm.from_dict(
        {
            "mode": mode,
            "field_p": field_p or "",
            "field_q": field_q or "",
            "curve_lower": curve_lower or "",
            "curve_upper": curve_upper or "",
            "x_min": x_min if x_min is not None else session.form.x_min,
            "x_max": x_max if x_max is not None else session.form.x_max,
        }
    )
    submitted = session.form
    started = time.monotonic()
    result = session.calculate()

    session_id = _get_session_id(session_data)
    event_log.log_calculation(
        session_id,
        event_log.calculation_record(session_id, submitted, result, step=session.step, started=started),
    )

    figure = dash.no_update
    if result.ok:
        figure = graph_engine.build_figure(session.snapshot)
    form = session.form
    return (
        session.to_dict(),
        _render_result(session),
        figure,
        form.field_p,
        form.field_q,
        form.curve_lower,
        form.curve_upper,
        form.x_min,
        form.x_max,
    )


@app.callback(
    Output("download-jsonl", "data"),
    Input("btn-download-jsonl", "n_clicks"),
    State("store-session", "data"),
    prevent_initial_call=True,
)
def _handle_download_jsonl(n_clicks, session_data):
    if not n_clicks:
        return dash.no_update
    path = event_log.session_log_path(_get_session_id(session_data))
    if not path.exists():
        return dash.no_update
    return dcc.send_file(str(path))


@app.callback(
    Output("download-csv", "data"),
    Input("btn-download-csv", "n_clicks"),
    State("store-session", "data"),
    prevent_initial_call=True,
)
def _handle_download_csv(n_clicks, session_data):
    if not n_clicks:
        return dash.no_update
    session_id = _get_session_id(session_data)
    records = event_log.read_jsonl(event_log.session_log_path(session_id))
    csv_content = event_log.build_csv_content(records)
    if not csv_content:
        return dash.no_update
    filename = f"session_{event_log.safe_session_id(session_id)}.csv"
    return dcc.send_string(csv_content, filename=filename)


if __name__ == "__main__":
    setup_logging()
    app.run(debug=True)
