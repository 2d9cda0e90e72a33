from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Union

from tsreduce.domain.point import TSPoint


@dataclass
class ExplicitSeries:
    """Points with explicit, possibly irregular timestamps.

    Attributes:
        ordered: True only while every appended point has ``ts`` greater than
            or equal to its predecessor's. Lets :meth:`sort` skip work when
            points already arrived in time order.
        points: Points in insertion order (time order once sorted).
    """

    ordered: bool = True
    points: list[TSPoint] = field(default_factory=list)

    @classmethod
    def from_points(cls, points: Iterable[TSPoint]) -> "ExplicitSeries":
        series = cls()
        for point in points:
            series.add_point(point)
        return series

    def add_point(self, point: TSPoint) -> None:
        if self.points and point.ts < self.points[-1].ts:
            self.ordered = False
        self.points.append(point)

    def sort(self) -> None:
        # list.sort is stable: equal timestamps keep their arrival order.
        if not self.ordered:
            self.points.sort(key=lambda p: p.ts)
            self.ordered = True

    @property
    def first(self) -> TSPoint:
        return self.points[0]

    @property
    def last(self) -> TSPoint:
        return self.points[-1]

    @property
    def time_range(self) -> int:
        return self.points[-1].ts - self.points[0].ts

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[TSPoint]:
        return iter(self.points)


@dataclass(frozen=True)
class NormalSeries:
    """Evenly spaced series: value ``i`` sits at ``start_ts + i * step_interval``."""

    start_ts: int
    step_interval: int
    values: tuple[float, ...]

    def __post_init__(self) -> None:
        if not isinstance(self.values, tuple):
            object.__setattr__(self, "values", tuple(self.values))

    def iter_points(self) -> Iterator[TSPoint]:
        for idx, value in enumerate(self.values):
            yield TSPoint(ts=self.start_ts + idx * self.step_interval, val=value)

    def __len__(self) -> int:
        return len(self.values)


@dataclass(frozen=True)
class SortedSeries:
    """Time-ordered points, the output form of LTTB."""

    points: tuple[TSPoint, ...]

    def __post_init__(self) -> None:
        if not isinstance(self.points, tuple):
            object.__setattr__(self, "points", tuple(self.points))

    @property
    def count(self) -> int:
        return len(self.points)

    def iter_points(self) -> Iterator[TSPoint]:
        return iter(self.points)

    def __len__(self) -> int:
        return len(self.points)


TimeSeries = Union[ExplicitSeries, NormalSeries]
OutputSeries = Union[SortedSeries, NormalSeries]
