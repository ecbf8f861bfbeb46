"""Terminal runner for the palm & planets quiz."""

import argparse
import asyncio
import base64
import logging
import mimetypes
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(".env.local")

# Ensure Google API key auth is used, not Vertex AI credentials from shell env.
# Must run before importing google.genai (via livekit.plugins.google).
for var in (
    "GOOGLE_APPLICATION_CREDENTIALS",
    "GOOGLE_CLOUD_PROJECT",
    "GOOGLE_CLOUD_LOCATION",
    "GOOGLE_GENAI_USE_VERTEXAI",
):
    os.environ.pop(var, None)

from config import Settings
from flow import OnboardingFlow
from readings import ReadingGenerator
from screens import (
    BirthDateScreen,
    BirthPlaceScreen,
    BirthTimeScreen,
    ColorScreen,
    ElementScreen,
    FullReportScreen,
    GoalsScreen,
    LandingScreen,
    PalmIntroScreen,
    PalmUploadScreen,
    ProcessingScreen,
    RelationshipScreen,
    ResultsPreviewScreen,
    Screen,
)
from session import OnboardingSession

logger = logging.getLogger("main")

BACK = "b"


def encode_image_file(path: Path) -> str:
    """Read an image file into a base64 data URL."""
    mime_type = mimetypes.guess_type(path.name)[0] or "image/jpeg"
    data = base64.b64encode(path.read_bytes()).decode()
    return f"data:{mime_type};base64,{data}"


def _label(option) -> str:
    return getattr(option, "value", option)


async def _ask(prompt: str) -> str:
    return (await asyncio.to_thread(input, prompt)).strip()


async def _choose(screen: Screen, options, prompt: str):
    """Ask for one of `options` by number. Returns None if the user went back."""
    for i, option in enumerate(options, start=1):
        print(f"  {i}. {_label(option)}")
    while True:
        answer = await _ask(prompt)
        if answer == BACK and screen.on_back:
            screen.on_back()
            return None
        if answer.isdigit() and 1 <= int(answer) <= len(options):
            return options[int(answer) - 1]
        print("Please pick one of the numbers above.")


def _print_header(screen: Screen) -> None:
    if screen.header:
        print(f"\n[{screen.header.percent:3d}%]  ('{BACK}' to go back)")
    else:
        print()


async def _text_step(screen, prompt: str, required: bool) -> None:
    answer = await _ask(prompt)
    if answer == BACK:
        screen.on_back()
        return
    if answer:
        screen.update(answer)
    elif not required:
        screen.update(None)
    screen.on_next()


async def run_quiz(flow: OnboardingFlow, palm_path: Path | None) -> None:
    while True:
        screen = flow.screen()
        _print_header(screen)

        if isinstance(screen, LandingScreen):
            print("Unlock destiny with planets and palm reading")
            gender = await _choose(screen, screen.options, "Your gender: ")
            screen.select(gender)
        elif isinstance(screen, BirthDateScreen):
            await _text_step(screen, "Date of birth (YYYY-MM-DD): ", required=True)
        elif isinstance(screen, BirthTimeScreen):
            await _text_step(
                screen, "Time of birth (HH:MM, blank if unknown): ", required=False
            )
        elif isinstance(screen, BirthPlaceScreen):
            await _text_step(screen, "Place of birth: ", required=True)
        elif isinstance(screen, ProcessingScreen):
            print(f"{screen.title}\n{screen.subtitle}")
            await flow.wait_idle()
        elif isinstance(screen, (RelationshipScreen, ColorScreen, ElementScreen)):
            choice = await _choose(screen, screen.options, "Your choice: ")
            if choice is not None:
                screen.select(choice)
        elif isinstance(screen, GoalsScreen):
            print(f"Pick up to {screen.max_selected} goals, then pick (continue)")
            choice = await _choose(
                screen, screen.options + ("(continue)",), "Toggle goal: "
            )
            if choice == "(continue)":
                if screen.can_continue:
                    screen.on_next()
            elif choice is not None:
                screen.toggle_goal(choice)
                print("Selected: " + ", ".join(g.value for g in flow.session.profile.goals))
        elif isinstance(screen, PalmIntroScreen):
            print("Next we read your palm. Have a clear photo of your dominant hand ready.")
            screen.on_next()
        elif isinstance(screen, PalmUploadScreen):
            path = palm_path or Path(await _ask("Path to your palm photo: "))
            palm_path = None
            try:
                screen.on_image_selected(encode_image_file(path))
            except OSError as e:
                print(f"Could not read {path}: {e}")
        elif isinstance(screen, ResultsPreviewScreen):
            print("Your palm reading IS READY!")
            if screen.palm:
                print(f"  Love {screen.palm.love_score}%  Health {screen.palm.health_score}%")
                print(f"  Wisdom {screen.palm.wisdom_score}%  Career {screen.palm.career_score}%")
                print(f"  Heart Line: {screen.palm.love_text}")
                print(f"  Life Line: {screen.palm.health_text}")
            await _ask("Press enter for the full report ")
            screen.on_next()
        elif isinstance(screen, FullReportScreen):
            print(f"Hello, {screen.greeting}. Born in {screen.birth_place}")
            print(f"  Sun sign: {screen.sun_sign}")
            print(f"  Moon sign: {screen.moon_sign}  Ascendant: {screen.ascendant}")
            print(f"  Cosmic prediction: {screen.prediction}")
            print(f"  Palm summary: {screen.palm_summary}")
            print(f"  Power word: {screen.power_word.upper()}")
            if screen.chart and screen.chart.lucky_color:
                print(f"  Lucky color: {screen.chart.lucky_color}")
            if screen.chart and screen.chart.compatibility_note:
                print(f"  Compatibility: {screen.chart.compatibility_note}")
            if screen.palm and screen.palm.dominant_hand_prediction:
                print(f"  Dominant hand: {screen.palm.dominant_hand_prediction}")
            answer = await _ask("Start over? [y/N] ")
            if answer.lower() != "y":
                return
            screen.start_over()


async def main(palm_path: Path | None = None) -> None:
    settings = Settings.from_env()
    session = OnboardingSession(reset_clears_profile=settings.reset_clears_profile)
    generator = ReadingGenerator(
        model=settings.model, geocode_api_key=settings.geocode_api_key
    )
    flow = OnboardingFlow(session, generator, settings)
    try:
        await run_quiz(flow, palm_path)
        logger.info("Quiz finished")
    finally:
        flow.close()


if __name__ == "__main__":
    arg_parser = argparse.ArgumentParser(description=__doc__)
    arg_parser.add_argument("--palm", type=Path, help="Palm photo to upload")
    arg_parser.add_argument("--verbose", action="store_true")
    args = arg_parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    asyncio.run(main(args.palm))
