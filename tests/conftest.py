import pytest

from models import ChartReading, PalmReading, ZodiacSign


@pytest.fixture
def chart_reading() -> ChartReading:
    return ChartReading(
        sun_sign=ZodiacSign.ARIES,
        moon_sign="Cancer",
        ascendant="Virgo",
        prediction="A door opens in spring.",
        power_word="Courage",
        lucky_color="Gold",
        compatibility_note="Leo fans your flame.",
    )


@pytest.fixture
def palm_reading() -> PalmReading:
    return PalmReading(
        love_score=81,
        health_score=74,
        wisdom_score=90,
        career_score=66,
        love_text="A deep heart line.",
        health_text="A long, steady life line.",
        wisdom_text="A curved head line.",
        career_text="The fate line starts late.",
        summary="A thoughtful palm.",
        dominant_hand_prediction="A late bloom.",
    )
