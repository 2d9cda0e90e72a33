from __future__ import annotations

import sys
from typing import Iterable, Optional, TextIO

from tsreduce.numeric.smoothing import asap_smooth


def _read_numbers(stream: TextIO) -> list[float]:
    return [float(tok) for line in stream for tok in line.replace(",", " ").split()]


def handle(
    *,
    resolution: int,
    values: Optional[Iterable[str]] = None,
    stream: Optional[TextIO] = None,
    out: Optional[TextIO] = None,
) -> list[float]:
    """Smooth raw numbers (no timestamps) and print one value per line."""
    data = [float(v) for v in values] if values else _read_numbers(stream or sys.stdin)
    smoothed = asap_smooth(data, resolution)
    sink = out or sys.stdout
    for value in smoothed:
        sink.write(f"{value!r}\n")
    return smoothed
