from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from fractions import Fraction
import math
import re

from dotnetrunner.domain.errors import RunnerConfigurationError

_INVALID_KEY = re.compile(r"[\s=]")


def format_property_value(value: object) -> str:
    # bool is an int subclass, so it has to be checked first.
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    if isinstance(value, Enum):
        return format_property_value(value.value)
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        return repr(value)
    if isinstance(value, Decimal):
        return format(value, "f") if value.is_finite() else str(value)
    if isinstance(value, (int, Fraction)):
        return str(value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value)


def validate_property_key(key: str) -> str:
    if not isinstance(key, str) or not key:
        raise RunnerConfigurationError(
            "Property name must be a non-empty string", details={"key": repr(key)}
        )
    if _INVALID_KEY.search(key):
        raise RunnerConfigurationError(
            f"Invalid property name: {key}",
            details={"key": key},
            hint="Property names may not contain whitespace or '='",
        )
    return key
