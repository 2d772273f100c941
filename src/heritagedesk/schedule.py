"""
Schedule Normalizer - Reconciles visiting-hour records into the canonical week.

Stored visiting hours come in several shapes:
- weekday as an ISO number (1 = Monday) or as a name
- openness as `is_closed` or as the inverted `is_open`
- times as `open_time`/`close_time` or `opening_time`/`closing_time`

All of them are folded into exactly seven OpeningDay records, Monday first.
"""

import logging
import re
from dataclasses import asdict
from typing import Any, Iterable, Optional

from heritagedesk.models import (
    DEFAULT_CLOSING_TIME,
    DEFAULT_OPENING_TIME,
    OpeningDay,
    Weekday,
    default_schedule,
)

logger = logging.getLogger('HeritageDesk')

_TIME_PATTERN = re.compile(r'^\s*(\d{1,2}):(\d{2})')

# Precedence: legacy column name first, then the canonical one
_OPENING_TIME_FIELDS = ("open_time", "opening_time")
_CLOSING_TIME_FIELDS = ("close_time", "closing_time")
_DAY_FIELDS = ("day_of_week", "day")


def format_time(value: Any, default: str) -> str:
    """
    Truncate a stored time ("09:00:00", "9:00") to HH:MM.

    Args:
        value: Stored time value
        default: Returned when the value is missing or unparseable

    Returns:
        Time as HH:MM
    """
    if not value:
        return default
    match = _TIME_PATTERN.match(str(value))
    if not match:
        logger.debug(f"Unparseable time {value!r}, using {default}")
        return default
    hours, minutes = match.groups()
    return f"{int(hours):02d}:{minutes}"


def resolve_weekday(value: Any, day_order: list[str] = Weekday.ALL) -> Optional[str]:
    """
    Resolve a stored weekday (number or name) to its canonical name.

    Args:
        value: 1-7 (1 = Monday), a numeric string, or a weekday name
        day_order: Canonical weekday names, Monday first

    Returns:
        Canonical weekday name or None if it cannot be resolved
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if isinstance(value, int):
        if 1 <= value <= len(day_order):
            return day_order[value - 1]
        return None
    if isinstance(value, str):
        wanted = value.strip().lower()
        for day in day_order:
            if day.lower() == wanted:
                return day
    return None


def _first_present(record: dict, fields: tuple[str, ...]) -> Any:
    for name in fields:
        if record.get(name):
            return record[name]
    return None


def _first_present_day(record: dict) -> Any:
    for name in _DAY_FIELDS:
        if record.get(name) is not None:
            return record[name]
    return None


def _as_record(record: Any) -> dict:
    if isinstance(record, OpeningDay):
        return asdict(record)
    return record


def _resolve_open(record: dict) -> bool:
    if record.get("is_closed") is not None:
        return not record["is_closed"]
    is_open = record.get("is_open")
    return True if is_open is None else bool(is_open)


def normalize_schedule(
    records: Optional[Iterable[Any]],
    day_order: list[str] = Weekday.ALL,
) -> list[OpeningDay]:
    """
    Fold visiting-hour records into the canonical seven-day schedule.

    Days without a matching record are closed but keep the placeholder
    times, so every day always carries an opening and closing time.
    Normalizing an already-canonical schedule returns an equal schedule.

    Args:
        records: Stored visiting-hour rows (dicts) or OpeningDay objects
        day_order: Canonical weekday names, Monday first

    Returns:
        Exactly one OpeningDay per canonical weekday, in order
    """
    by_day: dict[str, dict] = {}
    for raw in records or []:
        record = _as_record(raw)
        if not isinstance(record, dict):
            logger.warning(f"Ignoring visiting-hours entry of type {type(raw).__name__}")
            continue
        day = resolve_weekday(_first_present_day(record), day_order)
        if day is None:
            logger.warning(f"Ignoring visiting-hours row with unknown weekday: {record!r}")
            continue
        # Later rows for the same weekday replace earlier ones
        by_day[day.lower()] = record

    schedule = []
    for base in default_schedule(day_order):
        match = by_day.get(base.day.lower())
        if match is None:
            schedule.append(OpeningDay(
                day=base.day,
                is_open=False,
                opening_time=DEFAULT_OPENING_TIME,
                closing_time=DEFAULT_CLOSING_TIME,
            ))
            continue

        schedule.append(OpeningDay(
            day=base.day,
            is_open=_resolve_open(match),
            opening_time=format_time(_first_present(match, _OPENING_TIME_FIELDS), DEFAULT_OPENING_TIME),
            closing_time=format_time(_first_present(match, _CLOSING_TIME_FIELDS), DEFAULT_CLOSING_TIME),
        ))

    return schedule


def schedule_to_visiting_hours(schedule: list[OpeningDay]) -> list[dict]:
    """
    Convert a canonical schedule to visiting-hour rows for the backend.

    Times are always sent (HH:MM:SS), closed days included, so placeholder
    times survive a save/load cycle.
    """
    return [
        {
            "day_of_week": day.day,
            "is_open": day.is_open,
            "opening_time": f"{format_time(day.opening_time, DEFAULT_OPENING_TIME)}:00",
            "closing_time": f"{format_time(day.closing_time, DEFAULT_CLOSING_TIME)}:00",
            "notes": None,
        }
        for day in schedule
    ]
