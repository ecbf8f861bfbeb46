"""Tests for session state and the result cache."""

import pytest

from models import Gender, Goal, Profile, Step
from session import OnboardingSession, ResultCache


class TestResultCache:
    def test_starts_empty(self):
        cache = ResultCache()
        assert cache.astrology is None
        assert cache.palmistry is None

    def test_store_once(self, chart_reading, palm_reading):
        cache = ResultCache()
        assert cache.store_astrology(chart_reading) is True
        assert cache.store_palmistry(palm_reading) is True
        assert cache.astrology == chart_reading
        assert cache.palmistry == palm_reading

    def test_second_write_is_ignored(self, chart_reading):
        cache = ResultCache()
        cache.store_astrology(chart_reading)
        other = chart_reading.__class__(
            sun_sign=chart_reading.sun_sign,
            moon_sign="Leo",
            ascendant="Leo",
            prediction="Other",
            power_word="Other",
        )
        assert cache.store_astrology(other) is False
        assert cache.astrology == chart_reading

    def test_none_leaves_slot_untouched(self, chart_reading):
        cache = ResultCache()
        assert cache.store_astrology(None) is False
        assert cache.astrology is None

        cache.store_astrology(chart_reading)
        cache.store_astrology(None)
        assert cache.astrology == chart_reading

    def test_clear(self, chart_reading, palm_reading):
        cache = ResultCache(astrology=chart_reading, palmistry=palm_reading)
        cache.clear()
        assert cache.astrology is None
        assert cache.palmistry is None
        assert cache.store_astrology(chart_reading) is True


class TestOnboardingSession:
    def test_new_session(self):
        session = OnboardingSession()
        assert session.step == Step.LANDING
        assert session.profile == Profile()

    def test_update(self):
        session = OnboardingSession()
        session.update("gender", Gender.MALE)
        session.update("goals", [Goal.HEALTH])
        assert session.profile.gender == Gender.MALE
        assert session.profile.goals == [Goal.HEALTH]

    def test_update_unknown_field_raises(self):
        with pytest.raises(ValueError, match="Unknown profile field"):
            OnboardingSession().update("zodiac", "Leo")

    def test_reset_keeps_profile_by_default(self, chart_reading, palm_reading):
        session = OnboardingSession(step=Step.FULL_REPORT)
        session.update("birth_place", "Lisbon")
        session.results.store_astrology(chart_reading)
        session.results.store_palmistry(palm_reading)

        session.reset()

        assert session.step == Step.LANDING
        assert session.results.astrology is None
        assert session.results.palmistry is None
        assert session.profile.birth_place == "Lisbon"

    def test_reset_can_clear_profile(self):
        session = OnboardingSession(step=Step.FULL_REPORT, reset_clears_profile=True)
        session.update("birth_place", "Lisbon")
        session.reset()
        assert session.profile == Profile()
