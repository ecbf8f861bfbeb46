"""Quiz flow controller.

Owns the single control flow of a session: user actions and gate
completions both end up here, move the session through the sequencer and
start the processing work attached to a step on entry.
"""

import copy
import logging
from collections.abc import Callable
from functools import partial
from typing import Any

from config import Settings
from gate import AsyncTaskGate
from models import Goal, Step
from readings import FALLBACK_PALM_READING, ReadingGenerator, fallback_chart_reading
from screens import Screen, resolve_screen, toggle_goal
from sequencer import advance, back, shows_header
from session import OnboardingSession

logger = logging.getLogger("flow")


class OnboardingFlow:
    """Drives one quiz session.

    Every action is synchronous; processing steps schedule their work on
    the running event loop through an AsyncTaskGate, so the flow must be
    driven from inside a loop.
    """

    def __init__(
        self,
        session: OnboardingSession,
        generator: ReadingGenerator | None,
        settings: Settings | None = None,
        gate: AsyncTaskGate | None = None,
    ) -> None:
        self._session = session
        self._generator = generator
        self._settings = settings or Settings()
        self._gate = gate or AsyncTaskGate("processing")
        # Bumped on every step change so stale completions can be dropped
        self._entry = 0

    @property
    def session(self) -> OnboardingSession:
        return self._session

    @property
    def step(self) -> Step:
        return self._session.step

    def screen(self) -> Screen:
        return resolve_screen(self._session, self)

    # --- Actions ---

    def next(self) -> None:
        current = self._session.step
        following = advance(current, self._session.profile)
        if following == current:
            logger.debug(f"Staying on {current.name}")
            return
        self._enter(following)

    def back(self) -> None:
        current = self._session.step
        if not shows_header(current):
            logger.debug(f"Back is not available on {current.name}")
            return
        previous = back(current)
        if previous != current:
            self._enter(previous)

    def update(self, name: str, value: Any) -> None:
        self._session.update(name, value)

    def select(self, name: str, value: Any) -> None:
        """Set a field and move on, as the single-choice screens do."""
        self.update(name, value)
        self.next()

    def toggle_goal(self, goal: Goal) -> None:
        profile = self._session.profile
        profile.goals = toggle_goal(profile.goals, goal)

    def set_palm_image(self, image: str) -> None:
        self.update("palm_image", image)
        self.next()

    def start_over(self) -> None:
        self._session.reset()
        self._entry += 1
        logger.info("Starting over")

    async def wait_idle(self) -> None:
        """Wait until every scheduled processing run has completed."""
        await self._gate.wait()

    def close(self) -> None:
        """Tear down the flow; pending completions are dropped."""
        self._gate.close()

    # --- Step entry ---

    def _enter(self, step: Step) -> None:
        self._session.step = step
        self._entry += 1
        logger.info(f"Entered {step.name}")

        if step == Step.PROCESSING_CHART:
            self._start_chart()
        elif step == Step.PROCESSING_ACCURACY:
            self._gate.run(
                None,
                self._settings.accuracy_min_duration_ms,
                self._completion(lambda result: None),
            )
        elif step == Step.PROCESSING_PALM:
            self._start_palm()

    def _start_chart(self) -> None:
        results = self._session.results
        # Snapshot so later answers don't leak into an in-flight request
        snapshot = copy.deepcopy(self._session.profile)

        task = None
        if self._generator is not None and results.astrology is None:
            task = partial(self._generator.generate_chart, snapshot)

        fallback = None
        if self._settings.use_fallback_readings:
            fallback = fallback_chart_reading(snapshot)

        self._gate.run(
            task,
            self._settings.chart_min_duration_ms,
            self._completion(results.store_astrology),
            fallback=fallback,
            timeout_ms=self._settings.generation_timeout_ms,
        )

    def _start_palm(self) -> None:
        results = self._session.results
        image = self._session.profile.palm_image

        task = None
        if self._generator is not None and results.palmistry is None and image:
            task = partial(self._generator.analyze_palm, image)

        fallback = None
        if self._settings.use_fallback_readings:
            fallback = FALLBACK_PALM_READING

        self._gate.run(
            task,
            self._settings.palm_min_duration_ms,
            self._completion(results.store_palmistry),
            fallback=fallback,
            timeout_ms=self._settings.generation_timeout_ms,
        )

    def _completion(self, store: Callable[[Any], Any]) -> Callable[[Any], None]:
        entry = self._entry
        step = self._session.step

        def on_complete(result: Any) -> None:
            if entry != self._entry:
                logger.info(f"Dropping {step.name} result, the user has moved on")
                return
            store(result)
            self.next()

        return on_complete
