"""
Explicit parsing of numeric request input.

Request bodies and path segments arrive loosely typed (JSON numbers,
numeric strings, garbage). These helpers turn them into ``int`` or
``float`` before any business rule runs, and reject everything else
with a ``ValidationError`` naming the field.
"""

import math
from typing import Any

from .errors import InvalidNumberError


def parse_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise InvalidNumberError(f"{field} must be an integer", [field])
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise InvalidNumberError(f"{field} must be an integer", [field])


def parse_number(value: Any, field: str) -> float:
    if isinstance(value, bool):
        raise InvalidNumberError(f"{field} must be a number", [field])
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            raise InvalidNumberError(f"{field} must be a number", [field]) from None
    else:
        raise InvalidNumberError(f"{field} must be a number", [field])
    if not math.isfinite(number):
        raise InvalidNumberError(f"{field} must be a number", [field])
    return number


def coerce_number(value: Any, default: float = 0.0) -> float:
    """Best-effort number for stored data, which updates do not validate."""
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        try:
            number = float(str(value).strip())
        except (TypeError, ValueError):
            return default
    return number if math.isfinite(number) else default
