"""
Month bucket helpers for getMatchSingleList.do, which only answers one
`YYYY-MM` at a time.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

_DATE_FORMATS = ("%Y-%m-%d", "%Y.%m.%d", "%Y%m%d", "%Y/%m/%d", "%Y-%m-%d %H:%M:%S")


def parse_portal_date(value: Optional[str]) -> Optional[date]:
    text = (value or "").strip()
    if not text:
        return None
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def month_range(start_date: Optional[str], end_date: Optional[str]) -> List[str]:
    """
    Return every `YYYY-MM` from start to end inclusive.

    An unparsable start yields []; an unparsable end falls back to the start
    month, so there is always at least one bucket for a valid start.
    """
    start = parse_portal_date(start_date)
    if start is None:
        return []
    end = parse_portal_date(end_date) or start

    year, month = start.year, start.month
    months: List[str] = []
    while (year, month) <= (end.year, end.month):
        months.append(f"{year:04d}-{month:02d}")
        month += 1
        if month > 12:
            year, month = year + 1, 1
    return months
