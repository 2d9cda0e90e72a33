from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Generic, Iterable, Optional, TypeVar

from tsreduce.aggregates.utils import as_timestamp, is_missing
from tsreduce.domain.point import TSPoint
from tsreduce.domain.series import ExplicitSeries, OutputSeries, TimeSeries
from tsreduce.errors import AggregateConsumedError

logger = logging.getLogger(__name__)

TOutput = TypeVar("TOutput", bound=OutputSeries)


class SortedSeriesAggregate(ABC, Generic[TOutput]):
    """Accumulate points across many calls, sort once, finalize once.

    The shape of a SQL aggregate: ``add`` is the transition function and
    ``finalize`` the final function. State is created lazily by the first row
    carrying both a timestamp and a value; rows missing either are skipped.
    """

    def __init__(self, resolution: int) -> None:
        self.resolution = resolution
        self._series: Optional[ExplicitSeries] = None
        self._consumed = False
        self._skipped = 0

    def add(self, ts: Optional[int], val: Optional[float]) -> "SortedSeriesAggregate[TOutput]":
        self._ensure_live()
        if is_missing(ts) or is_missing(val):
            self._skipped += 1
            return self
        point = TSPoint(ts=as_timestamp(ts), val=float(val))
        if self._series is None:
            self._validate_resolution()
            self._series = ExplicitSeries(ordered=True, points=[point])
        else:
            self._series.add_point(point)
        return self

    def extend(self, rows: Iterable[tuple[Any, Any]]) -> "SortedSeriesAggregate[TOutput]":
        for ts, val in rows:
            self.add(ts, val)
        return self

    def finalize(self) -> Optional[TOutput]:
        self._ensure_live()
        self._consumed = True
        series, self._series = self._series, None
        if self._skipped and logger.isEnabledFor(logging.DEBUG):
            logger.debug("%s skipped %d rows with missing time or value", type(self).__name__, self._skipped)
        if series is None:
            return None
        series.sort()
        return self._finalize_series(series)

    @property
    def consumed(self) -> bool:
        return self._consumed

    def __len__(self) -> int:
        return 0 if self._series is None else len(self._series)

    def _ensure_live(self) -> None:
        if self._consumed:
            raise AggregateConsumedError(
                f"{type(self).__name__} was already finalized; create a new aggregate per group"
            )

    def _validate_resolution(self) -> None:
        """Reject unusable configuration before the first point is stored."""

    @abstractmethod
    def _finalize_series(self, series: TimeSeries) -> TOutput:
        ...
