"""Unit tests for the sun-sign calendar."""

from datetime import date

import pytest

from models import ZodiacSign
from zodiac import parse_birth_date, sun_sign, sun_sign_for


@pytest.mark.parametrize(
    "birth_date, expected",
    [
        ("1990-03-21", ZodiacSign.ARIES),
        ("2000-12-22", ZodiacSign.CAPRICORN),
        ("1975-07-23", ZodiacSign.LEO),
        ("1990-03-20", ZodiacSign.PISCES),
        ("1988-01-05", ZodiacSign.CAPRICORN),
        ("1988-01-20", ZodiacSign.AQUARIUS),
        ("1994-06-28", ZodiacSign.CANCER),
        ("2001-11-22", ZodiacSign.SAGITTARIUS),
        ("2001-12-31", ZodiacSign.CAPRICORN),
    ],
)
def test_sun_sign(birth_date, expected):
    assert sun_sign(birth_date) == expected


def test_every_day_of_a_leap_year_has_a_sign():
    day = date(2000, 1, 1)
    signs = set()
    while day.year == 2000:
        signs.add(sun_sign_for(day))
        day = date.fromordinal(day.toordinal() + 1)
    assert signs == set(ZodiacSign)


def test_long_form_date():
    assert sun_sign("July 23, 1975") == ZodiacSign.LEO


def test_unparseable_date_returns_none():
    assert sun_sign("not a date") is None
    assert parse_birth_date("") is None
