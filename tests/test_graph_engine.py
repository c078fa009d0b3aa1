"""Tests for boundary-curve sampling and the plotly figure."""

import pytest
from green_calculator import config
from green_calculator.graph_engine import (
    GraphSnapshot,
    build_figure,
    display_x_grid,
    generate_x_samples,
    sample_curve,
)


def test_generate_x_samples():
    assert generate_x_samples(0.0, 1.0, 0.25) == [0.0, 0.25, 0.5, 0.75, 1.0]
    assert generate_x_samples(1.0, 0.0, 0.25) == []


def test_display_grid_extends_past_x_max():
    xs = display_x_grid(GraphSnapshot("0", "x", 0.0, 1.0))
    assert xs[0] == 0.0
    assert xs[-1] == pytest.approx(1.0 + config.DISPLAY_X_PADDING)
    assert len(xs) == 41


def test_sample_curve_passes_non_numeric_through():
    assert sample_curve("sqrt(x)", [-1.0, 0.0, 4.0]) == [None, 0.0, 2.0]


def test_build_figure_has_two_labeled_series():
    fig = build_figure(GraphSnapshot("x^2", "x", 0.0, 1.0))
    names = [trace.name for trace in fig.data]
    assert names == [config.LOWER_SERIES_NAME, config.UPPER_SERIES_NAME]
    assert fig.layout.title.text == config.CHART_TITLE
    assert fig.data[0].y[2] == pytest.approx(0.01)
    assert fig.data[1].y[2] == pytest.approx(0.1)


def test_build_figure_without_snapshot():
    fig = build_figure(None)
    assert len(fig.data) == 0


class TestGraphSnapshot:
    def test_round_trip(self):
        snapshot = GraphSnapshot("x^2", "x", -1.0, 2.0)
        assert GraphSnapshot.from_dict(snapshot.to_dict()) == snapshot

    def test_incomplete_data(self):
        assert GraphSnapshot.from_dict(None) is None
        assert GraphSnapshot.from_dict({"curve_lower": "x"}) is None
        assert GraphSnapshot.from_dict({"curve_lower": "x", "curve_upper": "1", "x_min": "a", "x_max": 1}) is None
