from datetime import date, datetime, timezone
from typing import Optional

from dateutil import parser as date_parser


def utcnow() -> datetime:
    """Текущее время в UTC с явной таймзоной"""
    return datetime.now(timezone.utc)


def parse_day(value: Optional[str]) -> Optional[date]:
    """
    Преобразует строку из URL в дату.

    Args:
        value: Дата в формате ISO (2024-05-01) или полная отметка времени.

    Returns:
        Календарная дата (в UTC, если передано время с таймзоной) или None,
        если строку не удалось разобрать.
    """
    if not value:
        return None
    try:
        parsed = date_parser.isoparse(value)
    except (ValueError, OverflowError):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date()
