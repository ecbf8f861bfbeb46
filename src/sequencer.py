"""Step sequencing for the quiz.

Steps advance one at a time in `Step` order. Three steps hold the user until
a required answer is present; these are UI gates, not validation errors, so
an unmet guard simply leaves the step unchanged.
"""

from collections.abc import Callable

from models import Profile, Step

TOTAL_STEPS = 14

# Steps whose header (back button + progress bar) is hidden
HEADERLESS_STEPS = {Step.LANDING, Step.RESULTS_PREVIEW, Step.FULL_REPORT}

GUARDS: dict[Step, Callable[[Profile], bool]] = {
    Step.BIRTH_DATE: lambda profile: bool(profile.birth_date),
    Step.BIRTH_PLACE: lambda profile: bool(profile.birth_place.strip()),
    Step.PALM_UPLOAD: lambda profile: profile.palm_image is not None,
}


def can_advance(step: Step, profile: Profile) -> bool:
    """Check whether the guard (if any) for a step is satisfied."""
    if step == Step.FULL_REPORT:
        return False
    guard = GUARDS.get(step)
    return guard is None or guard(profile)


def advance(step: Step, profile: Profile) -> Step:
    """Return the step after `step`, or `step` itself if its guard is unmet.

    FullReport has no successor.
    """
    if not can_advance(step, profile):
        return step
    return Step(step + 1)


def back(step: Step) -> Step:
    """Return the previous step; Landing stays at Landing."""
    if step > Step.LANDING:
        return Step(step - 1)
    return step


def reset() -> Step:
    return Step.LANDING


def shows_header(step: Step) -> bool:
    return step not in HEADERLESS_STEPS


def progress_percent(step: int, total_steps: int = TOTAL_STEPS) -> int:
    """Progress bar fill for the header, as a whole percentage in [0, 100]."""
    if total_steps <= 0:
        return 100
    # Python's round() is banker's rounding; the bar rounds half up
    percent = int(100 * step / total_steps + 0.5)
    return max(0, min(100, percent))
