from __future__ import annotations


class TransformError(Exception):
    """Base class for failures that abort one aggregated group."""


class ConfigurationError(TransformError, ValueError):
    """The requested resolution cannot drive the transform."""


class InsufficientDataError(TransformError):
    """Not enough data to build even one interpolated bucket."""


class InvariantViolation(TransformError, RuntimeError):
    """An internal consistency check failed (bad series shape, zero median gap, ...)."""


class AggregateConsumedError(InvariantViolation):
    """An aggregate was used again after finalize."""


class GroupFailuresError(TransformError):
    """One or more groups failed; the others were still computed."""

    def __init__(self, failures: dict) -> None:
        self.failures = dict(failures)
        names = ", ".join(repr(group) for group in self.failures)
        super().__init__(f"{len(self.failures)} group(s) failed: {names}")
