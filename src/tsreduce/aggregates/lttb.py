from __future__ import annotations

import logging
from typing import Iterable, Sequence

from tsreduce.aggregates.base import SortedSeriesAggregate
from tsreduce.domain.point import TSPoint
from tsreduce.domain.series import ExplicitSeries, SortedSeries, TimeSeries
from tsreduce.errors import ConfigurationError, InvariantViolation

logger = logging.getLogger(__name__)


def _bucket_bounds(i: int, every: float) -> tuple[int, int]:
    # Recomputed per bucket from the float width, truncating toward zero.
    return int(i * every) + 1, int((i + 1) * every) + 1


def lttb_bucket_bounds(length: int, threshold: int) -> list[tuple[int, int]]:
    """Return the ``[start, end)`` index range of every adaptive bucket."""
    if threshold <= 2 or threshold >= length:
        return []
    every = (length - 2) / (threshold - 2)
    return [_bucket_bounds(i, every) for i in range(threshold - 2)]


def lttb(data: Sequence[TSPoint], threshold: int) -> Sequence[TSPoint]:
    """Downsample ``data`` to ``threshold`` points with Largest-Triangle-Three-Buckets.

    ``data`` must be sorted by timestamp. The first and last points are always
    kept; every bucket in between contributes the point forming the largest
    triangle with the previously selected point and the average of the next
    bucket. When ``threshold`` is 0 or not smaller than ``len(data)`` the input
    is returned as-is.

    Reference: Sveinn Steinarsson. 2013. Downsampling Time Series for Visual
    Representation. MSc thesis. University of Iceland.
    """
    length = len(data)
    if threshold >= length or threshold == 0:
        return data
    if threshold <= 2:
        raise ConfigurationError("threshold must be greater than 2")

    sampled: list[TSPoint] = [data[0]]
    every = (length - 2) / (threshold - 2)
    a = 0

    for i in range(threshold - 2):
        avg_range_start, avg_range_end = _bucket_bounds(i + 1, every)
        if avg_range_end >= length:
            avg_range_end = length
        avg_range_length = avg_range_end - avg_range_start

        sum_x = 0
        avg_y = 0.0
        for idx in range(avg_range_start, avg_range_end):
            sum_x += data[idx].ts
            avg_y += data[idx].val
        avg_x = _truncating_div(sum_x, avg_range_length)
        avg_y /= avg_range_length

        range_offs, range_to = _bucket_bounds(i, every)

        point_a_x = data[a].ts
        point_a_y = data[a].val

        max_area = -1.0
        next_a = range_offs
        for idx in range(range_offs, range_to):
            area = abs(
                (point_a_x - avg_x) * (data[idx].val - point_a_y)
                - (point_a_x - data[idx].ts) * (avg_y - point_a_y)
            ) * 0.5
            if area > max_area:
                max_area = area
                next_a = idx

        sampled.append(data[next_a])
        a = next_a

    sampled.append(data[length - 1])
    return sampled


def _truncating_div(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // denominator
    return quotient if numerator >= 0 else -quotient


class LttbAggregate(SortedSeriesAggregate[SortedSeries]):
    """Streaming LTTB: accumulate rows, downsample to ``resolution`` points."""

    def _validate_resolution(self) -> None:
        if self.resolution <= 2:
            raise ConfigurationError("resolution must be greater than 2")

    def _finalize_series(self, series: TimeSeries) -> SortedSeries:
        if not isinstance(series, ExplicitSeries):
            raise InvariantViolation(f"Unexpected timeseries format encountered: {type(series).__name__}")
        downsampled = lttb(series.points, self.resolution)
        logger.debug("lttb reduced %d points to %d", len(series), len(downsampled))
        return SortedSeries(points=tuple(downsampled))


def lttb_series(rows: Iterable[tuple[int, float]], resolution: int) -> SortedSeries | None:
    """Feed ``(ts, val)`` rows into a fresh :class:`LttbAggregate` and finalize it."""
    return LttbAggregate(resolution).extend(rows).finalize()
