"""Calendar arithmetic for monthly budget periods.

Period navigation and grid column generation both go through these helpers
so that month rollover is defined in one place.
"""

from datetime import date
from typing import NamedTuple

from src.domain.constants import MONTH_ABBREVIATIONS, MONTH_NAMES
from src.domain.errors import ValidationError


class YearMonth(NamedTuple):
    """Calendar month key."""

    year: int
    month: int


def validate_year_month(year: int, month: int) -> YearMonth:
    """Validate a year/month pair.

    Args:
        year: Calendar year, 1 or greater.
        month: Month number, 1-12.

    Returns:
        YearMonth: The validated pair.

    Raises:
        ValidationError: If either component is out of range.
    """
    if isinstance(year, bool) or not isinstance(year, int):
        raise ValidationError(f"Year must be an integer, got {year!r}")
    if isinstance(month, bool) or not isinstance(month, int):
        raise ValidationError(f"Month must be an integer, got {month!r}")
    if year < 1:
        raise ValidationError(f"Year must be 1 or greater, got {year}")
    if not 1 <= month <= 12:
        raise ValidationError(f"Month must be between 1 and 12, got {month}")
    return YearMonth(year, month)


def next_month(year: int, month: int) -> YearMonth:
    """Return the month following (year, month)."""
    validate_year_month(year, month)
    if month == 12:
        return YearMonth(year + 1, 1)
    return YearMonth(year, month + 1)


def previous_month(year: int, month: int) -> YearMonth:
    """Return the month preceding (year, month).

    Raises:
        ValidationError: If the input is invalid or precedes year 1.
    """
    validate_year_month(year, month)
    if month == 1:
        if year == 1:
            raise ValidationError("No month precedes January of year 1")
        return YearMonth(year - 1, 12)
    return YearMonth(year, month - 1)


def month_name(month: int) -> str:
    """Return the English name of a month number, or 'Unknown'."""
    if isinstance(month, int) and 1 <= month <= 12:
        return MONTH_NAMES[month - 1]
    return "Unknown"


def month_token(year: int, month: int) -> str:
    """Return the grid column token of a month, e.g. 'mar-25'."""
    validate_year_month(year, month)
    return f"{MONTH_ABBREVIATIONS[month - 1]}-{year % 100:02d}"


def parse_month_token(token: str, century: int = 2000) -> YearMonth:
    """Parse a 'mon-yy' token back into a year/month pair.

    Args:
        token: Column token such as 'jan-26'.
        century: Century added to the two-digit year.

    Returns:
        YearMonth: Parsed pair.

    Raises:
        ValidationError: If the token is malformed.
    """
    if not isinstance(token, str):
        raise ValidationError(f"Month token must be a string, got {token!r}")
    abbreviation, _, year_part = token.strip().lower().partition("-")
    if abbreviation not in MONTH_ABBREVIATIONS:
        raise ValidationError(f"Unknown month in token '{token}'")
    if len(year_part) != 2 or not year_part.isdigit():
        raise ValidationError(f"Invalid year in token '{token}'")
    return YearMonth(
        century + int(year_part),
        MONTH_ABBREVIATIONS.index(abbreviation) + 1,
    )


def generate_year_months(start: date, count: int = 12) -> list[YearMonth]:
    """Return sequential months starting at the month of start.

    Args:
        start: Any date within the first month.
        count: Number of months to produce.

    Raises:
        ValidationError: If count is negative.
    """
    if count < 0:
        raise ValidationError(f"Month count must be non-negative, got {count}")
    months: list[YearMonth] = []
    current = YearMonth(start.year, start.month)
    for _ in range(count):
        months.append(current)
        current = next_month(current.year, current.month)
    return months


def generate_months(start: date, count: int = 12) -> list[str]:
    """Return sequential month tokens starting at the month of start."""
    return [
        month_token(year, month)
        for year, month in generate_year_months(start, count)
    ]


__all__ = [
    "YearMonth",
    "validate_year_month",
    "next_month",
    "previous_month",
    "month_name",
    "month_token",
    "parse_month_token",
    "generate_year_months",
    "generate_months",
]
