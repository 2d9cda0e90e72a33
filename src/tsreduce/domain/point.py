from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, order=True)
class TSPoint:
    """A single timestamped sample.

    ``ts`` is an integer time unit (microseconds since epoch throughout
    tsreduce). Ordering compares ``ts`` only.
    """

    ts: int
    val: float = field(compare=False)

    def __iter__(self):
        """Retain tuple-like unpacking compatibility."""
        yield self.ts
        yield self.val
