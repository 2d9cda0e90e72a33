import math
from numbers import Integral
from typing import Any

from tsreduce.errors import ConfigurationError


def is_missing(value) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return False


def as_timestamp(value: Any) -> int:
    # numpy integers register as Integral; bool does too and is rejected.
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise ConfigurationError(f"timestamps must be integers, got {type(value).__name__}")
    return int(value)
