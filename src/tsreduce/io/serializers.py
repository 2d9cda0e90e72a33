from __future__ import annotations

import json
from typing import Any, Hashable, Iterator

from tsreduce.domain.series import NormalSeries, OutputSeries, SortedSeries
from tsreduce.errors import InvariantViolation


def series_payload(series: OutputSeries) -> dict[str, Any]:
    """Return the wire shape of an output series."""
    if isinstance(series, SortedSeries):
        return {
            "kind": "sorted",
            "count": series.count,
            "points": [[p.ts, p.val] for p in series.points],
        }
    if isinstance(series, NormalSeries):
        return {
            "kind": "normal",
            "start_ts": series.start_ts,
            "step_interval": series.step_interval,
            "values": list(series.values),
        }
    raise InvariantViolation(f"Unexpected timeseries format encountered: {type(series).__name__}")


def unnest(series: OutputSeries) -> Iterator[tuple[int, float]]:
    """Flatten an output series into ``(ts, val)`` rows."""
    if isinstance(series, (SortedSeries, NormalSeries)):
        for point in series.iter_points():
            yield point.ts, point.val
        return
    raise InvariantViolation(f"Unexpected timeseries format encountered: {type(series).__name__}")


class JsonLineSerializer:
    def __call__(self, group: Hashable, series: OutputSeries) -> str:
        payload = {"group": group, **series_payload(series)}
        return json.dumps(payload, ensure_ascii=False, default=str) + "\n"


class PrintSerializer:
    def __call__(self, group: Hashable, series: OutputSeries) -> str:
        return f"{group}: {series_payload(series)}\n"


class CsvRowSerializer:
    header = ("group", "time", "value")

    def __call__(self, group: Hashable, series: OutputSeries) -> Iterator[tuple[Any, int, float]]:
        cell = "" if group is None else group
        for ts, val in unnest(series):
            yield cell, ts, val
