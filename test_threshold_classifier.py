"""Threshold classification and point colors"""

import pytest

from threshold_chart.utilities.services.threshold_classifier import classify, point_colors


def test_scenario_values_around_threshold():
    assert classify([100, 110, 90], 105) == [False, True, False]


def test_value_equal_to_threshold_is_within():
    assert classify([105, 105.0, 105.0001], 105) == [False, False, True]


@pytest.mark.parametrize("threshold", [-1e9, -0.5, 0, 99.99, 100, 108, 1e12])
def test_matches_strict_greater_than(threshold):
    values = [-3.5, 0, 99.99, 100, 100.01, 108, 3290000]
    assert classify(values, threshold) == [value > threshold for value in values]


def test_empty_values():
    assert classify([], 10) == []
    assert point_colors([], 10) == []


def test_result_is_plain_bools():
    result = classify((1, 2, 3), 1.5)
    assert all(type(flag) is bool for flag in result)
    assert len(result) == 3


def test_point_colors_defaults_and_custom():
    assert point_colors([100, 110, 90], 105) == ['green', 'red', 'green']
    assert point_colors([1, 2], 1, exceeded_color='#f00', within_color='#0f0') == ['#0f0', '#f00']
