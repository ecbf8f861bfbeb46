"""Tropical sun-sign lookup from a calendar date."""

import logging
from datetime import date

from dateutil import parser as date_parser

from models import ZodiacSign

logger = logging.getLogger("zodiac")

# (month, first day) on which each sign begins, in calendar order
SIGN_START_DATES = [
    (1, 20, ZodiacSign.AQUARIUS),
    (2, 19, ZodiacSign.PISCES),
    (3, 21, ZodiacSign.ARIES),
    (4, 20, ZodiacSign.TAURUS),
    (5, 21, ZodiacSign.GEMINI),
    (6, 21, ZodiacSign.CANCER),
    (7, 23, ZodiacSign.LEO),
    (8, 23, ZodiacSign.VIRGO),
    (9, 23, ZodiacSign.LIBRA),
    (10, 23, ZodiacSign.SCORPIO),
    (11, 22, ZodiacSign.SAGITTARIUS),
    (12, 22, ZodiacSign.CAPRICORN),
]


def parse_birth_date(birth_date: str) -> date | None:
    """Parse a birth date string (e.g. "1990-03-21" or "March 21, 1990")."""
    if not birth_date:
        return None
    try:
        return date_parser.parse(birth_date).date()
    except (ValueError, OverflowError) as e:
        logger.error(f"Failed to parse birth date {birth_date!r}: {e}")
        return None


def sun_sign_for(day: date) -> ZodiacSign:
    # Dates before Jan 20 wrap around to Capricorn
    sign = ZodiacSign.CAPRICORN
    for month, first_day, candidate in SIGN_START_DATES:
        if (day.month, day.day) >= (month, first_day):
            sign = candidate
    return sign


def sun_sign(birth_date: str) -> ZodiacSign | None:
    """Return the sun sign for a birth date string, or None if it can't be parsed."""
    day = parse_birth_date(birth_date)
    if day is None:
        return None
    return sun_sign_for(day)
