"""
Field extraction helpers shared by response normalizers.

Exchanges send numbers as decimal strings; they are parsed into Decimal
without going through float. Absent or empty values become None so that
"unknown" stays distinct from "zero".
"""

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, List, Mapping, Optional, Sequence, TypeVar

T = TypeVar("T")


def safe_string(data: Mapping[str, Any], key: str, default: Optional[str] = None) -> Optional[str]:
    """
    Read a value as a string.

    Args:
        data: Raw exchange mapping.
        key: Field name.
        default: Returned when the field is absent, None or empty.

    Returns:
        Optional[str]: String value or default.

    Example:
        >>> safe_string({"id": 386394956}, "id")
        '386394956'
    """
    value = data.get(key)
    if value is None or value == "":
        return default
    return str(value)


def to_decimal(value: Any) -> Optional[Decimal]:
    """
    Convert a raw value to Decimal.

    Args:
        value: Decimal string, int, Decimal, or None.

    Returns:
        Optional[Decimal]: Parsed value, or None for None / empty string.

    Raises:
        ValueError: If the value is not a valid number.
    """
    if value is None or value == "":
        return None
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Invalid decimal value: {value!r}")
    try:
        return Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"Invalid decimal value: {value!r}") from e


def safe_decimal(data: Mapping[str, Any], key: str) -> Optional[Decimal]:
    """Read a field as Decimal (None when absent)."""
    return to_decimal(data.get(key))


def parse8601(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp into an aware UTC datetime.

    Args:
        value: Timestamp such as "2018-10-25T16:41:44.780Z".

    Returns:
        Optional[datetime]: Parsed timestamp, or None if absent or malformed.
    """
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def iso8601(value: datetime) -> str:
    """
    Format a datetime as ISO-8601 with millisecond precision.

    Naive datetimes are taken to be UTC.

    Example:
        >>> iso8601(datetime(2018, 10, 25, 16, 41, 44, 780000, tzinfo=timezone.utc))
        '2018-10-25T16:41:44.780Z'
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def to_milliseconds(value: datetime) -> int:
    """Convert a datetime to a Unix timestamp in milliseconds."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp() * 1000)


def decimal_sum(values: Iterable[Optional[Decimal]]) -> Decimal:
    """Sum values, skipping None."""
    total = Decimal("0")
    for value in values:
        if value is not None:
            total += value
    return total


def _sort_key(item: Any) -> float:
    timestamp = getattr(item, "timestamp", None)
    return timestamp.timestamp() if timestamp is not None else 0.0


def filter_by_since_limit(
    items: Sequence[T],
    since: Optional[datetime] = None,
    limit: Optional[int] = None,
) -> List[T]:
    """
    Sort records by timestamp and apply since / limit.

    Args:
        items: Records with a ``timestamp`` attribute.
        since: Keep records at or after this time.
        limit: Keep at most this many records (oldest first).

    Returns:
        List of records.
    """
    result = sorted(items, key=_sort_key)
    if since is not None:
        if since.tzinfo is None:
            since = since.replace(tzinfo=timezone.utc)
        result = [
            item for item in result
            if getattr(item, "timestamp", None) is not None and item.timestamp >= since
        ]
    if limit is not None:
        result = result[:limit]
    return result
