from __future__ import annotations

import math
from enum import Enum
from typing import Protocol

from tsreduce.domain.series import ExplicitSeries, NormalSeries
from tsreduce.errors import InsufficientDataError, InvariantViolation


class GapfillMethod(str, Enum):
    LINEAR = "linear"


class Normalizer(Protocol):
    """Turn a sorted explicit series into an evenly spaced one.

    Implementations raise :class:`InsufficientDataError` when the series cannot
    support even one full bucket of width ``interval``.
    """

    def normalize(
        self,
        series: ExplicitSeries,
        interval: int,
        method: GapfillMethod,
    ) -> NormalSeries:
        ...


class LinearGapfillNormalizer:
    """Average points into fixed-width buckets and interpolate empty ones.

    Buckets are ``[start + k * interval, start + (k + 1) * interval)`` anchored
    at the first timestamp; there are ``(last - first) // interval + 1`` of
    them, so the final bucket is usually only partly covered by data.
    """

    def normalize(
        self,
        series: ExplicitSeries,
        interval: int,
        method: GapfillMethod = GapfillMethod.LINEAR,
    ) -> NormalSeries:
        if not series.ordered:
            raise InvariantViolation("series must be sorted before normalization")
        if method is not GapfillMethod.LINEAR:
            raise InvariantViolation(f"Unsupported gapfill method: {method!r}")
        if len(series) < 2 or interval <= 0 or series.time_range < interval:
            raise InsufficientDataError(
                "Not enough data to generate a normalized representation "
                f"(points={len(series)}, interval={interval})"
            )

        start = series.first.ts
        num_buckets = series.time_range // interval + 1
        sums = [0.0] * num_buckets
        counts = [0] * num_buckets
        for point in series:
            bucket = (point.ts - start) // interval
            sums[bucket] += point.val
            counts[bucket] += 1

        values = [s / c if c else math.nan for s, c in zip(sums, counts)]
        _fill_linear(values)
        return NormalSeries(start_ts=start, step_interval=interval, values=tuple(values))


def _fill_linear(values: list[float]) -> None:
    # First and last buckets always hold a point, so every gap has two anchors.
    left = 0
    for idx in range(1, len(values)):
        if math.isnan(values[idx]):
            continue
        gap = idx - left
        if gap > 1:
            lo, hi = values[left], values[idx]
            for step in range(1, gap):
                values[left + step] = lo + (hi - lo) * step / gap
        left = idx
