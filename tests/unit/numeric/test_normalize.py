from __future__ import annotations

import pytest

from tsreduce.domain.point import TSPoint
from tsreduce.domain.series import ExplicitSeries
from tsreduce.errors import InsufficientDataError, InvariantViolation
from tsreduce.numeric.normalize import GapfillMethod, LinearGapfillNormalizer


def _series(pairs):
    return ExplicitSeries.from_points(TSPoint(ts, val) for ts, val in pairs)


def test_buckets_average_points_from_first_timestamp():
    series = _series([(100, 1.0), (104, 3.0), (110, 5.0), (125, 7.0)])
    normal = LinearGapfillNormalizer().normalize(series, 10, GapfillMethod.LINEAR)

    assert normal.start_ts == 100
    assert normal.step_interval == 10
    assert normal.values == (2.0, 5.0, 7.0)


def test_empty_buckets_are_linearly_interpolated():
    series = _series([(0, 0.0), (1, 0.0), (40, 8.0), (41, 8.0)])
    normal = LinearGapfillNormalizer().normalize(series, 10)

    assert normal.values == (0.0, 2.0, 4.0, 6.0, 8.0)


def test_last_bucket_may_be_partial():
    series = _series([(0, 1.0), (10, 2.0), (20, 3.0)])
    normal = LinearGapfillNormalizer().normalize(series, 15)
    assert normal.values == (1.5, 3.0)


@pytest.mark.parametrize(
    ("pairs", "interval"),
    [
        ([(0, 1.0)], 10),
        ([(0, 1.0), (5, 1.0)], 10),
        ([(0, 1.0), (50, 1.0)], 0),
        ([(0, 1.0), (50, 1.0)], -5),
    ],
)
def test_insufficient_data(pairs, interval):
    with pytest.raises(InsufficientDataError):
        LinearGapfillNormalizer().normalize(_series(pairs), interval)


def test_unsorted_series_is_rejected():
    with pytest.raises(InvariantViolation):
        LinearGapfillNormalizer().normalize(_series([(5, 1.0), (0, 1.0)]), 1)
