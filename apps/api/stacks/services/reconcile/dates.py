"""
Date normalization for resume, account, and transcript dates.

Sources produce wildly inconsistent date strings ("03/24", "2019", "March 2021",
"2020-05-01", "Present"). normalize_date runs an ordered list of strategies and
returns the first match; every strategy rejects years outside [MIN_YEAR, MAX_YEAR]
so two-digit overflow and OCR noise never become dates.
"""

from __future__ import annotations

import calendar
import re
from datetime import date, datetime
from typing import Any, Callable, Optional

from stacks.core.constants import MIN_YEAR, MAX_YEAR

DateStrategy = Callable[[str], Optional[date]]

_CURRENT_MARKER = re.compile(r"present|current", re.IGNORECASE)
_MONTH_YEAR = re.compile(r"^(\d{1,2})/(\d{2,4})$")
_YEAR_ONLY = re.compile(r"^(\d{4})$")
_MONTH_NAME_YEAR = re.compile(r"^([^\W\d_]+)\.?\s+(\d{4})$")

# Fallback formats tried after ISO parsing, in order.
_FALLBACK_FORMATS = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%d/%m/%Y",
    "%d-%m-%Y",
    "%d.%m.%Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
    "%B, %Y",
    "%b, %Y",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%SZ",
)


def _year_in_bounds(year: int) -> bool:
    return MIN_YEAR <= year <= MAX_YEAR


def _month_lookup() -> dict[str, int]:
    """Month names and abbreviations for the current locale, lowercased."""
    names: dict[str, int] = {}
    for idx in range(1, 13):
        for label in (calendar.month_name[idx], calendar.month_abbr[idx]):
            if label:
                names[label.lower().rstrip(".")] = idx
    return names


def _parse_current(text: str) -> Optional[date]:
    if _CURRENT_MARKER.search(text):
        return date.today()
    return None


def _parse_month_slash_year(text: str) -> Optional[date]:
    m = _MONTH_YEAR.match(text)
    if not m:
        return None
    month = int(m.group(1))
    year = int(m.group(2))
    if year < 100:
        year += 2000
    if not 1 <= month <= 12 or not _year_in_bounds(year):
        return None
    return date(year, month, 1)


def _parse_year(text: str) -> Optional[date]:
    m = _YEAR_ONLY.match(text)
    if not m:
        return None
    year = int(m.group(1))
    if not _year_in_bounds(year):
        return None
    return date(year, 1, 1)


def _parse_month_name_year(text: str) -> Optional[date]:
    m = _MONTH_NAME_YEAR.match(text)
    if not m:
        return None
    month = _month_lookup().get(m.group(1).lower())
    year = int(m.group(2))
    if month is None or not _year_in_bounds(year):
        return None
    return date(year, month, 1)


def _parse_general(text: str) -> Optional[date]:
    parsed: Optional[date] = None
    iso = f"{text}-01" if len(text) == 7 and text[4] == "-" else text
    try:
        parsed = date.fromisoformat(iso)
    except ValueError:
        for fmt in _FALLBACK_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt).date()
                break
            except ValueError:
                continue
    if parsed is None or not _year_in_bounds(parsed.year):
        return None
    return parsed


# Resolution order: first strategy returning a date wins.
DATE_STRATEGIES: tuple[tuple[str, DateStrategy], ...] = (
    ("current", _parse_current),
    ("month_slash_year", _parse_month_slash_year),
    ("year", _parse_year),
    ("month_name_year", _parse_month_name_year),
    ("general", _parse_general),
)


def normalize_date(raw: Any) -> Optional[date]:
    """Map a heterogeneous date string to a date, or None. Never raises."""
    if isinstance(raw, datetime):
        return raw.date() if _year_in_bounds(raw.year) else None
    if isinstance(raw, date):
        return raw if _year_in_bounds(raw.year) else None
    if not isinstance(raw, str):
        return None
    text = raw.strip()
    if not text:
        return None
    for _name, strategy in DATE_STRATEGIES:
        try:
            result = strategy(text)
        except (ValueError, OverflowError):
            result = None
        if result is not None:
            return result
    return None


def is_current_marker(end_date: Any) -> bool:
    """True when an end date is missing or says "present"/"current" (position still held)."""
    if end_date is None:
        return True
    if not isinstance(end_date, str):
        return False
    text = end_date.strip()
    return not text or bool(_CURRENT_MARKER.search(text))
