"""Time Utilities - UTC timestamps and formatting"""
from datetime import datetime, timezone
from typing import Any
from dateutil import parser as date_parser


def utc_now() -> datetime:
    """Get current UTC datetime"""
    return datetime.now(timezone.utc)


def parse_iso(iso_string: str) -> datetime:
    """
    Parse ISO 8601 string to datetime

    Accepts plain dates ("2024-05-01") as well, which parse to midnight UTC.

    Args:
        iso_string: ISO formatted datetime string

    Returns:
        Datetime object in UTC
    """
    dt = date_parser.isoparse(iso_string)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def coerce_utc(value: Any) -> Any:
    """
    Normalize a datetime-ish value to an aware UTC datetime.

    Strings are parsed as ISO 8601, naive datetimes are taken as UTC.
    None and other types pass through untouched for pydantic to judge.
    """
    if isinstance(value, str):
        if not value.strip():
            return None
        return parse_iso(value)
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    return value

