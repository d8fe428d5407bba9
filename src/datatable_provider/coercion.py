"""
Value typing policy for memory-side evaluation.

Every field declares a :class:`ValueType`; both the row value and the
filter value are converted to that type before they are compared, so
``=``, ``<`` and ``BETWEEN`` behave the same whatever the source record
types are.
"""

from __future__ import annotations

import datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from .exceptions import ValueCoercionError
from .operators import ValueType


def coerce_value(value: Any, value_type: ValueType) -> Any:
    """
    Convert *value* to the Python type backing *value_type*.

    Lists and tuples are converted item by item. ``None`` is returned
    unchanged.

    Raises:
        ValueCoercionError: If the value cannot be represented.
    """
    if value is None:
        return None
    if isinstance(value, list | tuple):
        return [coerce_value(item, value_type) for item in value]

    if value_type is ValueType.NUMBER:
        return _to_number(value)
    if value_type is ValueType.DATE:
        return _to_datetime(value)
    return to_text(value)


def to_text(value: Any) -> str:
    """String form used for ``STRING`` fields and pattern matching."""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime.datetime | datetime.date):
        return value.isoformat()
    return str(value)


def _to_number(value: Any) -> int | float:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = Decimal(text)
        except InvalidOperation as exc:
            raise ValueCoercionError(value, ValueType.NUMBER.value) from exc
        if not number.is_finite():
            raise ValueCoercionError(value, ValueType.NUMBER.value)
        return float(number)
    raise ValueCoercionError(value, ValueType.NUMBER.value)


def _to_datetime(value: Any) -> datetime.datetime:
    """Dates become midnight datetimes; aware values are normalised to naive UTC."""
    if isinstance(value, datetime.datetime):
        result = value
    elif isinstance(value, datetime.date):
        result = datetime.datetime.combine(value, datetime.time.min)
    elif isinstance(value, str):
        try:
            result = datetime.datetime.fromisoformat(
                value.strip().replace("Z", "+00:00")
            )
        except ValueError as exc:
            raise ValueCoercionError(value, ValueType.DATE.value) from exc
    else:
        raise ValueCoercionError(value, ValueType.DATE.value)

    if result.tzinfo is not None:
        result = result.astimezone(datetime.timezone.utc).replace(tzinfo=None)
    return result
