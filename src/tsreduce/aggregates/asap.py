from __future__ import annotations

import logging
from typing import Iterable, Optional

from tsreduce.aggregates.base import SortedSeriesAggregate
from tsreduce.domain.series import ExplicitSeries, NormalSeries, TimeSeries
from tsreduce.errors import (
    ConfigurationError,
    InsufficientDataError,
    InvariantViolation,
    TransformError,
)
from tsreduce.numeric.normalize import GapfillMethod, LinearGapfillNormalizer, Normalizer
from tsreduce.numeric.smoothing import AsapSmoother, Smoother

logger = logging.getLogger(__name__)


def find_downsample_interval(series: ExplicitSeries, resolution: int) -> int:
    """Pick a bucket width for ``resolution`` buckets that snaps to the typical sample gap.

    Equal-width buckets from the total range alone smooth visibly rougher when
    buckets hold different numbers of points, so the naive width is truncated
    to a multiple of the median gap between samples. The median (upper-middle
    element for an even number of gaps) is used instead of the mean because it
    is not dragged around by gaps in the data.
    """
    if not series.ordered:
        raise InvariantViolation("series must be sorted before choosing a downsample interval")
    if len(series) < 2:
        raise InvariantViolation("at least two points are needed to choose a downsample interval")

    candidate = series.time_range // resolution

    points = series.points
    diffs = sorted(points[i].ts - points[i - 1].ts for i in range(1, len(points)))
    median = diffs[len(diffs) // 2]
    if median <= 0:
        raise InvariantViolation(
            f"median gap between samples must be positive, got {median}; "
            "duplicate timestamps dominate the series"
        )
    return candidate // median * median


class AsapAggregate(SortedSeriesAggregate[NormalSeries]):
    """Streaming ASAP: normalize accumulated points to a grid, then smooth.

    ``normalizer`` and ``smoother`` default to the reference implementations
    and can be swapped for any object honouring the same contract.
    """

    def __init__(
        self,
        resolution: int,
        *,
        normalizer: Optional[Normalizer] = None,
        smoother: Optional[Smoother] = None,
    ) -> None:
        super().__init__(resolution)
        self.normalizer = normalizer or LinearGapfillNormalizer()
        self.smoother = smoother or AsapSmoother()

    def _validate_resolution(self) -> None:
        if self.resolution < 1:
            raise ConfigurationError("resolution must be at least 1")

    def _finalize_series(self, series: TimeSeries) -> NormalSeries:
        if not isinstance(series, ExplicitSeries):
            raise InvariantViolation(f"Unexpected timeseries format encountered: {type(series).__name__}")

        # Only downsample when there are at least twice as many points as the
        # resolution; otherwise keep roughly one bucket per point.
        if len(series) >= 2 * self.resolution:
            interval = find_downsample_interval(series, self.resolution)
            logger.debug("asap downsampling %d points at interval %d", len(series), interval)
        else:
            interval = series.time_range // len(series)
            logger.debug("asap normalizing %d sparse points at interval %d", len(series), interval)

        try:
            normal = self.normalizer.normalize(series, interval, GapfillMethod.LINEAR)
        except (InsufficientDataError, InvariantViolation):
            raise
        except TransformError as exc:
            raise InvariantViolation(f"normalization failed: {exc}") from exc

        # The last bucket is only partly covered by data.
        values = list(normal.values[:-1])

        smoothed = list(self.smoother.smooth(values, self.resolution))
        if not smoothed:
            raise InsufficientDataError("Not enough data to generate a smoothed representation")

        # Stretch the step so the output spans the same range as the normalized input.
        step_interval = normal.step_interval * len(values) // len(smoothed)
        logger.info(
            "asap smoothed %d points into %d values (step %d)",
            len(series),
            len(smoothed),
            step_interval,
        )
        return NormalSeries(start_ts=normal.start_ts, step_interval=step_interval, values=tuple(smoothed))


def asap_series(
    rows: Iterable[tuple[int, float]],
    resolution: int,
    **kwargs,
) -> NormalSeries | None:
    """Feed ``(ts, val)`` rows into a fresh :class:`AsapAggregate` and finalize it."""
    return AsapAggregate(resolution, **kwargs).extend(rows).finalize()
