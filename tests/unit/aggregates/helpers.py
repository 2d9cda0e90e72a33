from __future__ import annotations

import math

from tsreduce.domain.point import TSPoint

DAY_US = 86_400 * 1_000_000


def make_points(values: list[float], *, start: int = 0, step: int = 1) -> list[TSPoint]:
    return [TSPoint(ts=start + i * step, val=v) for i, v in enumerate(values)]


def as_tuples(points) -> list[tuple[int, float]]:
    return [(p.ts, p.val) for p in points]


def cyclic_rows_with_gap_and_dip() -> list[tuple[int, float]]:
    """Daily ``10 + 5*cos(day)`` for days 0..3000, minus days 1001-1040, 2 lower over 2001-2200."""
    rows: list[tuple[int, float]] = []
    for day in range(0, 3001):
        if 1001 <= day <= 1040:
            continue
        base = 8.0 if 2001 <= day <= 2200 else 10.0
        rows.append((day * DAY_US, base + 5 * math.cos(day)))
    return rows


def triangle_area(a: tuple[float, float], b: tuple[float, float], c: tuple[float, float]) -> float:
    return abs((a[0] - c[0]) * (b[1] - a[1]) - (a[0] - b[0]) * (c[1] - a[1])) * 0.5
