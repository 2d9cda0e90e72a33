from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Hashable, Iterable, Optional

from tqdm import tqdm

from tsreduce.aggregates.base import SortedSeriesAggregate
from tsreduce.domain.series import OutputSeries
from tsreduce.errors import TransformError

logger = logging.getLogger(__name__)

AggregateFactory = Callable[[Hashable], SortedSeriesAggregate]


@dataclass(frozen=True)
class Row:
    """One input row: group key plus an optional timestamp and value."""

    group: Hashable
    ts: Optional[int]
    val: Optional[float]


@dataclass
class GroupedResults:
    """Per-group outputs plus the groups whose aggregate raised."""

    series: dict[Hashable, OutputSeries] = field(default_factory=dict)
    failures: dict[Hashable, TransformError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures


def aggregate_rows(
    rows: Iterable[Row],
    factory: AggregateFactory,
    *,
    progress: bool = False,
) -> GroupedResults:
    """Run one aggregate per group over ``rows`` (a streaming GROUP BY).

    Aggregates are created on the first row of each group and finalized once
    after the input is exhausted. Groups whose aggregate produced nothing are
    left out. A :class:`TransformError` raised while adding to or finalizing
    one group is recorded under that group; its later rows are dropped and
    every other group is still computed.
    """
    states: dict[Hashable, SortedSeriesAggregate] = {}
    results = GroupedResults()
    stream: Iterable[Row] = tqdm(rows, desc="rows", unit="row", leave=False) if progress else rows
    for row in stream:
        if row.group in results.failures:
            continue
        state = states.get(row.group)
        if state is None:
            state = factory(row.group)
            states[row.group] = state
        try:
            state.add(row.ts, row.val)
        except TransformError as exc:
            _record_failure(results, row.group, exc)
            del states[row.group]

    for group, state in states.items():
        try:
            output = state.finalize()
        except TransformError as exc:
            _record_failure(results, group, exc)
            continue
        if output is None:
            logger.debug("group %r produced no output", group)
            continue
        results.series[group] = output
    logger.info("finalized %d groups with output, %d failed", len(results.series), len(results.failures))
    return results


def _record_failure(results: GroupedResults, group: Hashable, exc: TransformError) -> None:
    logger.error("group %r failed: %s: %s", group, type(exc).__name__, exc)
    results.failures[group] = exc


def aggregate_factory(aggregate_cls: Any, resolution: int, **kwargs) -> AggregateFactory:
    def _factory(_group: Hashable) -> SortedSeriesAggregate:
        return aggregate_cls(resolution, **kwargs)

    return _factory
