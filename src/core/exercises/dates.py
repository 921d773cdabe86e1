"""
Calendar rules for logged exercise dates.

Dates arrive as MM-DD-YY strings. The format itself is checked by the
validator; this module answers whether the parsed month/day/year actually
exists on the Gregorian calendar. Everything here is pure.
"""

import re
from typing import Optional

LOG_DATE_PATTERN = re.compile(r"([0-9]{2})-([0-9]{2})-([0-9]{2})")

MONTHS_WITH_31_DAYS = frozenset({1, 3, 5, 7, 8, 10, 12})
MONTHS_WITH_30_DAYS = frozenset({4, 6, 9, 11})
FEBRUARY = 2

# Two-digit years are read as 20YY
CENTURY_OFFSET = 2000


def is_leap_year(year: int) -> bool:
    """Divisible by 4 and not by 100, unless also divisible by 400."""
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


def is_valid_calendar_date(month: int, day: int, year: int) -> bool:
    """
    Check that a day exists in the given month and year.

    Months outside 1..12 and days below 1 are never valid. February
    allows day 29 only in leap years.
    """
    if day < 1:
        return False

    if month in MONTHS_WITH_31_DAYS:
        return day <= 31
    if month in MONTHS_WITH_30_DAYS:
        return day <= 30
    if month == FEBRUARY:
        return day <= 28 or (day <= 29 and is_leap_year(year))

    return False


def parse_log_date(value: str) -> Optional[tuple[int, int, int]]:
    """
    Split a strict MM-DD-YY string into (month, day, full_year).

    Returns None when the string doesn't match the format exactly.
    """
    match = LOG_DATE_PATTERN.fullmatch(value)
    if match is None:
        return None

    month, day, short_year = (int(part) for part in match.groups())
    return month, day, CENTURY_OFFSET + short_year
