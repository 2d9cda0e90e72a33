from __future__ import annotations

from tsreduce.domain.point import TSPoint
from tsreduce.domain.series import ExplicitSeries, NormalSeries, SortedSeries


def test_points_compare_by_timestamp_only():
    assert TSPoint(1, 5.0) == TSPoint(1, 7.0)
    assert TSPoint(1, 9.0) < TSPoint(2, 0.0)
    ts, val = TSPoint(3, 1.5)
    assert (ts, val) == (3, 1.5)


def test_add_point_tracks_ordering():
    series = ExplicitSeries()
    series.add_point(TSPoint(1, 1.0))
    series.add_point(TSPoint(1, 2.0))
    series.add_point(TSPoint(5, 3.0))
    assert series.ordered

    series.add_point(TSPoint(4, 4.0))
    assert not series.ordered
    assert len(series) == 4


def test_sort_is_stable_for_duplicate_timestamps():
    series = ExplicitSeries.from_points(
        [TSPoint(3, 1.0), TSPoint(1, 2.0), TSPoint(3, 3.0), TSPoint(1, 4.0), TSPoint(2, 5.0)]
    )
    series.sort()

    assert series.ordered
    assert [(p.ts, p.val) for p in series] == [(1, 2.0), (1, 4.0), (2, 5.0), (3, 1.0), (3, 3.0)]


def test_sort_skips_already_ordered_series():
    points = [TSPoint(1, 1.0), TSPoint(2, 2.0)]
    series = ExplicitSeries(ordered=True, points=points)
    series.sort()
    assert series.points is points


def test_normal_series_unnests_implicit_timestamps():
    series = NormalSeries(start_ts=100, step_interval=10, values=[1.0, 2.0, 3.0])
    assert series.values == (1.0, 2.0, 3.0)
    assert [(p.ts, p.val) for p in series.iter_points()] == [(100, 1.0), (110, 2.0), (120, 3.0)]


def test_sorted_series_counts_points():
    series = SortedSeries(points=[TSPoint(1, 1.0), TSPoint(2, 2.0)])
    assert series.count == 2
    assert [p.ts for p in series.iter_points()] == [1, 2]
