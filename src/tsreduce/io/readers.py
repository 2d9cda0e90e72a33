from __future__ import annotations

import csv
import json
import sys
from pathlib import Path
from typing import Any, Iterator, Optional, TextIO

from tsreduce.config.transform import InputConfig
from tsreduce.pipeline.grouping import Row
from tsreduce.utils.time import to_micros


def iter_jsonl(fh: TextIO) -> Iterator[dict]:
    """Yield JSON objects per line, skipping blank lines."""
    for lineno, line in enumerate(fh, start=1):
        if not line.strip():
            continue
        try:
            rec = json.loads(line)
        except json.JSONDecodeError as exc:
            raise ValueError(f"invalid JSON on line {lineno}: {exc}") from exc
        if not isinstance(rec, dict):
            raise ValueError(f"line {lineno} must hold a JSON object, got {type(rec).__name__}")
        yield rec


def iter_csv(fh: TextIO) -> Iterator[dict]:
    """Yield dict rows from CSV. Assumes first row is header."""
    yield from csv.DictReader(fh)


def parse_value(value: Any) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    text = str(value).strip()
    if not text:
        return None
    return float(text)


def iter_rows(config: InputConfig, stream: Optional[TextIO] = None) -> Iterator[Row]:
    """Read ``config.path`` (or ``stream``/stdin) into grouping rows."""
    if config.path is not None:
        with Path(config.path).open("r", encoding="utf-8", newline="") as fh:
            yield from _rows_from(fh, config)
        return
    yield from _rows_from(stream or sys.stdin, config)


def _rows_from(fh: TextIO, config: InputConfig) -> Iterator[Row]:
    records = iter_csv(fh) if config.format == "csv" else iter_jsonl(fh)
    for record in records:
        group = record.get(config.group_by) if config.group_by else None
        yield Row(
            group=group,
            ts=to_micros(record.get(config.time_field)),
            val=parse_value(record.get(config.value_field)),
        )
