from __future__ import annotations

import csv
import os
import sys
import tempfile
from pathlib import Path
from typing import Hashable, TextIO

from tsreduce.config.transform import OutputConfig
from tsreduce.domain.series import OutputSeries
from tsreduce.io.serializers import CsvRowSerializer, JsonLineSerializer, PrintSerializer


class AtomicTextFileSink:
    """Write to a temp file next to ``dest`` and move it into place on close."""

    def __init__(self, dest: Path):
        self._dest = Path(dest)
        self._dest.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self._dest.parent, prefix=f".{self._dest.name}.", suffix=".tmp")
        self._tmp = Path(tmp)
        self.fh: TextIO = os.fdopen(fd, "w", encoding="utf-8", newline="")

    def write_text(self, text: str) -> None:
        self.fh.write(text)

    def close(self) -> None:
        self.fh.close()
        os.replace(self._tmp, self._dest)

    def abort(self) -> None:
        """Drop the temp file and leave any existing ``dest`` untouched."""
        self.fh.close()
        self._tmp.unlink(missing_ok=True)


class StdoutTextSink:
    def __init__(self) -> None:
        self.fh: TextIO = sys.stdout

    def write_text(self, text: str) -> None:
        self.fh.write(text)

    def close(self) -> None:
        self.fh.flush()

    def abort(self) -> None:
        self.fh.flush()


class LineWriter:
    """Text line writer (uses a text sink + string formatter)."""

    def __init__(self, sink: StdoutTextSink | AtomicTextFileSink, formatter):
        self.sink = sink
        self.fmt = formatter

    def write(self, group: Hashable, series: OutputSeries) -> None:
        self.sink.write_text(self.fmt(group, series))

    def close(self) -> None:
        self.sink.close()

    def abort(self) -> None:
        self.sink.abort()


class CsvFileWriter:
    def __init__(self, dest: Path):
        self.sink = AtomicTextFileSink(dest)
        self.writer = csv.writer(self.sink.fh)
        self._fmt = CsvRowSerializer()
        self.writer.writerow(self._fmt.header)

    def write(self, group: Hashable, series: OutputSeries) -> None:
        self.writer.writerows(self._fmt(group, series))

    def close(self) -> None:
        self.sink.close()

    def abort(self) -> None:
        self.sink.abort()


def writer_factory(config: OutputConfig):
    if config.format == "csv":
        return CsvFileWriter(config.path)
    sink = AtomicTextFileSink(config.path) if config.path is not None else StdoutTextSink()
    if config.format == "print":
        return LineWriter(sink, PrintSerializer())
    return LineWriter(sink, JsonLineSerializer())
