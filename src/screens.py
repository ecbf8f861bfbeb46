"""Screen resolution: which screen a step shows and what it is wired to.

Screens never change the step themselves. They only call back into the
flow (`on_next`, `on_back`, field updates), except the full report's
`start_over`, which resets the session.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

from models import (
    FAVORITE_COLORS,
    ChartReading,
    Element,
    Gender,
    Goal,
    PalmReading,
    RelationshipStatus,
    Step,
)
from sequencer import TOTAL_STEPS, can_advance, progress_percent, shows_header
from session import OnboardingSession

MAX_GOALS = 3

PENDING_SIGN = "Calculating..."
PENDING_PREDICTION = "The stars are currently aligning to generate your unique path..."
PENDING_PALM_SUMMARY = "Analyzing palm lines..."
PENDING_POWER_WORD = "DESTINY"


class FlowActions(Protocol):
    def next(self) -> None: ...

    def back(self) -> None: ...

    def update(self, name: str, value: Any) -> None: ...

    def select(self, name: str, value: Any) -> None: ...

    def toggle_goal(self, goal: Goal) -> None: ...

    def set_palm_image(self, image: str) -> None: ...

    def start_over(self) -> None: ...


def toggle_goal(goals: list[Goal], goal: Goal) -> list[Goal]:
    """Return the goal selection after tapping `goal`.

    A selected goal is always removed. An unselected goal is added only
    while fewer than three are selected; otherwise nothing changes.
    """
    if goal in goals:
        return [g for g in goals if g != goal]
    if len(goals) < MAX_GOALS:
        return [*goals, goal]
    return list(goals)


class ProcessingKind(Enum):
    CHART = "chart"
    ACCURACY = "accuracy"
    PALM = "palm"


@dataclass(frozen=True)
class Header:
    step: int
    total_steps: int
    percent: int


@dataclass(frozen=True)
class Screen:
    step: Step
    header: Header | None
    on_back: Callable[[], None] | None


@dataclass(frozen=True)
class LandingScreen(Screen):
    options: tuple[Gender, ...]
    select: Callable[[Gender], None]


@dataclass(frozen=True)
class BirthDateScreen(Screen):
    value: str
    can_continue: bool
    update: Callable[[str], None]
    on_next: Callable[[], None]


@dataclass(frozen=True)
class BirthTimeScreen(Screen):
    value: str | None
    update: Callable[[str | None], None]
    # "I don't remember" and "Continue" both just move on
    on_next: Callable[[], None]


@dataclass(frozen=True)
class BirthPlaceScreen(Screen):
    value: str
    can_continue: bool
    update: Callable[[str], None]
    on_next: Callable[[], None]


@dataclass(frozen=True)
class ProcessingScreen(Screen):
    kind: ProcessingKind
    title: str
    subtitle: str


@dataclass(frozen=True)
class RelationshipScreen(Screen):
    options: tuple[RelationshipStatus, ...]
    selected: RelationshipStatus | None
    select: Callable[[RelationshipStatus], None]


@dataclass(frozen=True)
class GoalsScreen(Screen):
    options: tuple[Goal, ...]
    selected: tuple[Goal, ...]
    max_selected: int
    can_continue: bool
    toggle_goal: Callable[[Goal], None]
    on_next: Callable[[], None]


@dataclass(frozen=True)
class ColorScreen(Screen):
    options: tuple[str, ...]
    selected: str | None
    select: Callable[[str], None]


@dataclass(frozen=True)
class ElementScreen(Screen):
    options: tuple[Element, ...]
    selected: Element | None
    select: Callable[[Element], None]


@dataclass(frozen=True)
class PalmIntroScreen(Screen):
    on_next: Callable[[], None]


@dataclass(frozen=True)
class PalmUploadScreen(Screen):
    has_image: bool
    on_image_selected: Callable[[str], None]


@dataclass(frozen=True)
class ResultsPreviewScreen(Screen):
    palm: PalmReading | None
    palm_image: str | None
    on_next: Callable[[], None]

    @property
    def pending(self) -> bool:
        return self.palm is None


@dataclass(frozen=True)
class FullReportScreen(Screen):
    chart: ChartReading | None
    palm: PalmReading | None
    greeting: str
    birth_place: str
    start_over: Callable[[], None]

    @property
    def sun_sign(self) -> str:
        return self.chart.sun_sign.value if self.chart else "Sun"

    @property
    def moon_sign(self) -> str:
        return self.chart.moon_sign if self.chart else PENDING_SIGN

    @property
    def ascendant(self) -> str:
        return self.chart.ascendant if self.chart else PENDING_SIGN

    @property
    def prediction(self) -> str:
        return self.chart.prediction if self.chart else PENDING_PREDICTION

    @property
    def power_word(self) -> str:
        return self.chart.power_word if self.chart else PENDING_POWER_WORD

    @property
    def palm_summary(self) -> str:
        return self.palm.summary if self.palm else PENDING_PALM_SUMMARY


PROCESSING_COPY = {
    Step.PROCESSING_CHART: (
        ProcessingKind.CHART,
        "Mapping your birth chart...",
        "Your chart shows a rare spark, let's discover your best match",
    ),
    Step.PROCESSING_ACCURACY: (
        ProcessingKind.ACCURACY,
        "Forecast accuracy",
        "You're close to a big reveal! Confirm one last thing...",
    ),
    Step.PROCESSING_PALM: (
        ProcessingKind.PALM,
        "Analyzing Lines...",
        "Deciphering the unique paths of your destiny...",
    ),
}


def _header(step: Step) -> Header | None:
    if not shows_header(step):
        return None
    return Header(
        step=int(step), total_steps=TOTAL_STEPS, percent=progress_percent(step)
    )


def _setter(actions: FlowActions, name: str) -> Callable[[Any], None]:
    return lambda value: actions.update(name, value)


def _selector(actions: FlowActions, name: str) -> Callable[[Any], None]:
    return lambda value: actions.select(name, value)


def resolve_screen(session: OnboardingSession, actions: FlowActions) -> Screen:
    """Build the screen for the session's current step."""
    step = session.step
    profile = session.profile
    results = session.results

    header = _header(step)
    base = {
        "step": step,
        "header": header,
        "on_back": actions.back if header else None,
    }

    if step == Step.LANDING:
        return LandingScreen(
            **base, options=tuple(Gender), select=_selector(actions, "gender")
        )
    if step == Step.BIRTH_DATE:
        return BirthDateScreen(
            **base,
            value=profile.birth_date,
            can_continue=can_advance(step, profile),
            update=_setter(actions, "birth_date"),
            on_next=actions.next,
        )
    if step == Step.BIRTH_TIME:
        return BirthTimeScreen(
            **base,
            value=profile.birth_time,
            update=_setter(actions, "birth_time"),
            on_next=actions.next,
        )
    if step == Step.BIRTH_PLACE:
        return BirthPlaceScreen(
            **base,
            value=profile.birth_place,
            can_continue=can_advance(step, profile),
            update=_setter(actions, "birth_place"),
            on_next=actions.next,
        )
    if step in PROCESSING_COPY:
        kind, title, subtitle = PROCESSING_COPY[step]
        return ProcessingScreen(**base, kind=kind, title=title, subtitle=subtitle)
    if step == Step.RELATIONSHIP:
        return RelationshipScreen(
            **base,
            options=tuple(RelationshipStatus),
            selected=profile.relationship_status,
            select=_selector(actions, "relationship_status"),
        )
    if step == Step.GOALS:
        return GoalsScreen(
            **base,
            options=tuple(Goal),
            selected=tuple(profile.goals),
            max_selected=MAX_GOALS,
            can_continue=len(profile.goals) > 0,
            toggle_goal=actions.toggle_goal,
            on_next=actions.next,
        )
    if step == Step.COLOR:
        return ColorScreen(
            **base,
            options=tuple(FAVORITE_COLORS),
            selected=profile.favorite_color,
            select=_selector(actions, "favorite_color"),
        )
    if step == Step.ELEMENT:
        return ElementScreen(
            **base,
            options=tuple(Element),
            selected=profile.element,
            select=_selector(actions, "element"),
        )
    if step == Step.PALM_INTRO:
        return PalmIntroScreen(**base, on_next=actions.next)
    if step == Step.PALM_UPLOAD:
        return PalmUploadScreen(
            **base,
            has_image=profile.palm_image is not None,
            on_image_selected=actions.set_palm_image,
        )
    if step == Step.RESULTS_PREVIEW:
        return ResultsPreviewScreen(
            **base,
            palm=results.palmistry,
            palm_image=profile.palm_image,
            on_next=actions.next,
        )
    if step == Step.FULL_REPORT:
        return FullReportScreen(
            **base,
            chart=results.astrology,
            palm=results.palmistry,
            greeting="Goddess" if profile.gender == Gender.FEMALE else "Traveler",
            birth_place=profile.birth_place,
            start_over=actions.start_over,
        )

    raise ValueError(f"No screen for step {step!r}")
