from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture
def write_csv(tmp_path: Path):
    """Return a helper that writes ``(time, value, host)`` rows to a CSV file."""

    def _write(rows, name: str = "rows.csv") -> Path:
        path = tmp_path / name
        lines = ["time,value,host"] + [f"{ts},{val},{host}" for ts, val, host in rows]
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write
