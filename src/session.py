"""Session-scoped state: the profile, the generated readings and the current step."""

import logging
from dataclasses import dataclass, field

from models import ChartReading, PalmReading, Profile, Step
from sequencer import reset as initial_step

logger = logging.getLogger("session")


@dataclass
class ResultCache:
    """Holds the two generated readings. Each slot is written at most once."""

    astrology: ChartReading | None = None
    palmistry: PalmReading | None = None

    def store_astrology(self, reading: ChartReading | None) -> bool:
        """Store a chart reading. Returns True if the slot was written."""
        if reading is None:
            return False
        if self.astrology is not None:
            logger.warning("Astrology reading already stored, ignoring new value")
            return False
        self.astrology = reading
        return True

    def store_palmistry(self, reading: PalmReading | None) -> bool:
        """Store a palm reading. Returns True if the slot was written."""
        if reading is None:
            return False
        if self.palmistry is not None:
            logger.warning("Palm reading already stored, ignoring new value")
            return False
        self.palmistry = reading
        return True

    def clear(self) -> None:
        self.astrology = None
        self.palmistry = None


@dataclass
class OnboardingSession:
    """Everything one quiz run knows about the user.

    Created at session start and passed by reference to the flow, the
    screen resolver and the gate callbacks.
    """

    profile: Profile = field(default_factory=Profile)
    results: ResultCache = field(default_factory=ResultCache)
    step: Step = Step.LANDING
    reset_clears_profile: bool = False

    def update(self, name: str, value) -> None:
        """Set a single profile field."""
        if name not in Profile.__dataclass_fields__:
            raise ValueError(f"Unknown profile field: {name}")
        setattr(self.profile, name, value)

    def reset(self) -> None:
        """Go back to Landing and forget the readings."""
        self.step = initial_step()
        self.results.clear()
        if self.reset_clears_profile:
            self.profile = Profile()
        logger.info(
            "Session reset (profile %s)",
            "cleared" if self.reset_clears_profile else "kept",
        )
