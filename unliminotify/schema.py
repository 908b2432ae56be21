#!/usr/bin/env python3
"""
Schema Definitions
Immutable dataclasses describing the parsed Cineworld listings feed.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional, Tuple

from .errors import ParseFailure

# Display formats used in SMS messages and the report table
DATE_FORMAT = "%a {day:>2} %b"
TIME_FORMAT = "%H:%M"

# Feed show times look like "Sat 1 Jun 19:30" and carry no year
SHOW_TIME_PATTERN = re.compile(
    r"^\s*(?P<weekday>[A-Za-z]{3})\s+(?P<day>\d{1,2})\s+(?P<month>[A-Za-z]{3})"
    r"\s+(?P<clock>\d{1,2}:\d{2})\s*$"
)
SHOW_TIME_FORMAT = "%Y %d %b %H:%M"

# Dates further than this in the past belong to next year's listings
YEAR_ROLLOVER_DAYS = 180


@dataclass(frozen=True)
class Show:
    """A single showing of a film, identified by its booking URL"""

    url: str
    raw_time: str

    def time(self, today: Optional[date] = None) -> datetime:
        """
        Parse the raw feed time into a datetime

        Args:
            today: Reference date used to pick the year (default: today)

        Returns:
            Datetime of the showing

        Raises:
            ParseFailure: If the raw time is not in the feed format
        """
        return parse_show_time(self.raw_time, today)


@dataclass(frozen=True)
class Film:
    """A titled group of showings at one cinema"""

    title: str
    shows: Tuple[Show, ...] = ()


@dataclass(frozen=True)
class Cinema:
    """A cinema with its current film listing"""

    id: int
    name: str
    films: Tuple[Film, ...] = ()


@dataclass(frozen=True)
class Listings:
    """All cinemas in the listings feed, in feed order"""

    cinemas: Tuple[Cinema, ...] = ()


def parse_show_time(raw_time: str, today: Optional[date] = None) -> datetime:
    """Parse a feed time such as "Sat 1 Jun 19:30" into a datetime"""
    match = SHOW_TIME_PATTERN.match(raw_time)
    if not match:
        raise ParseFailure(f"Unrecognised show time: {raw_time!r}")

    today = today or date.today()
    text = f"{match['day']} {match['month']} {match['clock']}"
    try:
        parsed = datetime.strptime(f"{today.year} {text}", SHOW_TIME_FORMAT)
    except ValueError as e:
        # 29 Feb outside a leap year may still be valid for next year
        try:
            parsed = datetime.strptime(f"{today.year + 1} {text}", SHOW_TIME_FORMAT)
        except ValueError:
            raise ParseFailure(f"Invalid show time {raw_time!r}: {e}") from e
        return parsed

    if parsed.date() < today - timedelta(days=YEAR_ROLLOVER_DAYS):
        try:
            parsed = parsed.replace(year=today.year + 1)
        except ValueError as e:
            raise ParseFailure(f"Invalid show time {raw_time!r}: {e}") from e
    return parsed


def format_date(value: datetime) -> str:
    """Format a date as e.g. "Sat  1 Jun" """
    return value.strftime(DATE_FORMAT.format(day=value.day))


def format_time(value: datetime) -> str:
    """Format a time on the 24-hour clock"""
    return value.strftime(TIME_FORMAT)
