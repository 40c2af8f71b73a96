import pytest
from hypothesis import given
from hypothesis import strategies as st

from wms.client.submitter import Direction, direction_for
from wms.client.variance import compute_variance


@pytest.mark.parametrize(
    "physical, system, expected",
    [
        (45, 50, -5),
        (50, 50, 0),
        (0, 0, 0),
        (12, 0, 12),
        (0, 7, -7),
    ],
)
def test_variance_is_physical_minus_system(physical, system, expected):
    assert compute_variance(physical, system) == expected


@given(st.integers(min_value=0), st.integers(min_value=0))
def test_variance_sign_matches_direction(physical, system):
    variance = compute_variance(physical, system)
    assert variance == physical - system
    if variance != 0:
        expected = Direction.INCREASE if physical > system else Direction.DECREASE
        assert direction_for(variance) is expected
