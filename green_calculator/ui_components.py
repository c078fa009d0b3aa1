"""Streamlit form controls for the calculator."""

import streamlit as st

from . import config
from .engine import IntegrationMode


def mode_selector(key="form_mode"):
    labels = list(config.MODE_OPTIONS.values())
    values = list(config.MODE_OPTIONS.keys())
    choice = st.selectbox("Select the case", labels, key=key)
    return IntegrationMode(values[labels.index(choice)])


def field_inputs(mode):
    if mode is IntegrationMode.VECTOR_FIELD:
        st.text_input("Component P(x, y)", key="form_field_p", placeholder=config.PLACEHOLDERS["field_p"])
        st.text_input("Component Q(x, y)", key="form_field_q", placeholder=config.PLACEHOLDERS["field_q"])
    else:
        st.text_input("Function to integrate", key="form_field_q", placeholder=config.PLACEHOLDERS["integrand"])


def limit_inputs():
    st.text_input("Lower curve (in y)", key="form_curve_lower", placeholder=config.PLACEHOLDERS["curve_lower"])
    st.text_input("Upper curve (in y)", key="form_curve_upper", placeholder=config.PLACEHOLDERS["curve_upper"])
    left, right = st.columns(2)
    with left:
        st.number_input("x minimum", key="form_x_min", step=0.5, format="%.2f")
    with right:
        st.number_input("x maximum", key="form_x_max", step=0.5, format="%.2f")
