import pytest

from hmsnova.services.environment import calculate_significance, measurement_status


@pytest.mark.parametrize(("severity", "likelihood", "score"), [(1, 1, 1), (3, 4, 12), (5, 5, 25)])
def test_significance_is_severity_times_likelihood(severity, likelihood, score):
    assert calculate_significance(severity, likelihood) == score


@pytest.mark.parametrize(
    ("measured", "limit", "target", "expected"),
    [
        (12.0, 10.0, 8.0, "NON_COMPLIANT"),
        (9.0, 10.0, 8.0, "WARNING"),
        (8.0, 10.0, 8.0, "COMPLIANT"),
        (10.0, 10.0, None, "COMPLIANT"),
        (500.0, None, None, "COMPLIANT"),
    ],
)
def test_measurement_status(measured, limit, target, expected):
    assert measurement_status(measured, limit, target) == expected
