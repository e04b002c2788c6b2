"""
Time normalization for word timestamps coming from different STT backends.

TimeValue variants and their interpretation:
- int / float               -> milliseconds
- "1234" / "1234.5"         -> milliseconds (bare numeric string)
- "12.3s"                   -> seconds
- {"seconds": .., "nanos": ..} or an object with seconds/nanos attributes
  (Google protobuf Duration) -> seconds * 1000 + nanos / 1e6
- datetime.timedelta        -> total seconds * 1000

Lenient by contract: missing, unparseable or non-finite values normalize to 0.
"""
from __future__ import annotations

import math
import numbers
from datetime import timedelta
from typing import Any, Mapping, Protocol, Union


class DurationLike(Protocol):
    seconds: Any
    nanos: Any


TimeValue = Union[int, float, str, Mapping[str, Any], DurationLike, timedelta, None]


def _as_float(value: Any) -> float:
    """Number or numeric string -> finite float; anything else -> 0.0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        if isinstance(value, numbers.Real):
            result = float(value)
        elif isinstance(value, str):
            result = float(value.strip())
        else:
            return 0.0
    except (ValueError, OverflowError):
        return 0.0
    return result if math.isfinite(result) else 0.0


def to_milliseconds(value: TimeValue) -> float:
    """Convert any TimeValue variant to milliseconds. Never raises."""
    result = _raw_milliseconds(value)
    # Scaling can overflow finite inputs
    return result if math.isfinite(result) else 0.0


def _raw_milliseconds(value: TimeValue) -> float:
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, numbers.Real):
        return _as_float(value)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("s"):
            return _as_float(text[:-1]) * 1000
        return _as_float(text)
    if isinstance(value, timedelta):
        return value.total_seconds() * 1000
    if isinstance(value, Mapping):
        seconds = value.get("seconds")
        nanos = value.get("nanos")
    else:
        seconds = getattr(value, "seconds", None)
        nanos = getattr(value, "nanos", None)
    return _as_float(seconds) * 1000 + _as_float(nanos) / 1e6
