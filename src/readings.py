"""Reading generator: asks the LLM for a birth chart and a palm reading."""

import json
import logging
import re
from dataclasses import replace

from livekit.agents.llm import ChatContext, ImageContent
from livekit.plugins import google

from config import DEFAULT_MODEL
from geocoding import geocode_place
from models import ChartReading, PalmReading, Profile, ZodiacSign
from prompts import load_prompt, render_prompt
from zodiac import sun_sign

logger = logging.getLogger("readings")

CHART_REQUIRED_KEYS = {"sunSign", "moonSign", "ascendant", "prediction", "powerWord"}
CHART_OPTIONAL_KEYS = {"luckyColor", "compatibilityNote"}

PALM_SCORE_KEYS = ("loveScore", "healthScore", "wisdomScore", "careerScore")
PALM_TEXT_KEYS = ("loveText", "healthText", "wisdomText", "careerText", "summary")

_DATA_URL_PATTERN = re.compile(r"^data:(?P<mime>[\w/+.-]+);base64,(?P<data>.*)$", re.S)

FALLBACK_CHART_READING = ChartReading(
    sun_sign=ZodiacSign.AQUARIUS,
    moon_sign="Virgo",
    ascendant="Libra",
    prediction=(
        "The stars align to bring new opportunities in your career sector. "
        "Embrace the unexpected."
    ),
    power_word="Transformation",
    lucky_color="Teal",
    compatibility_note="You harmonize best with patient, grounded souls.",
)

FALLBACK_PALM_READING = PalmReading(
    love_score=78,
    health_score=88,
    wisdom_score=82,
    career_score=91,
    love_text="Your Heart Line indicates a passionate nature.",
    health_text="Strong vitality is shown in your Life Line.",
    wisdom_text="A clear thinker with practical solutions.",
    career_text="Success is indicated through persistence.",
    summary="Your palm reveals a balanced life with strong potential for leadership.",
    dominant_hand_prediction="Your dominant hand points to a future you shape yourself.",
)


def fallback_chart_reading(profile: Profile) -> ChartReading:
    """The fixed fallback chart, with the sun sign taken from the birth date."""
    computed = sun_sign(profile.birth_date)
    if computed is None:
        return FALLBACK_CHART_READING
    return replace(FALLBACK_CHART_READING, sun_sign=computed)


def _extract_json(response_text: str) -> dict:
    """Parse a JSON object from an LLM response, tolerating markdown code fences."""
    json_text = response_text
    if "```json" in json_text:
        json_text = json_text.split("```json", 1)[1]
        json_text = json_text.split("```", 1)[0]
    elif "```" in json_text:
        json_text = json_text.split("```", 1)[1]
        json_text = json_text.split("```", 1)[0]

    try:
        data = json.loads(json_text.strip())
    except json.JSONDecodeError as e:
        logger.error("Failed to parse reading response as JSON: %s", e)
        logger.debug("Raw response: %s", response_text)
        raise ValueError(f"Reading returned invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Reading must be a JSON object, got {type(data).__name__}")
    return data


def _require_text(data: dict, key: str) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise ValueError(f"Field '{key}' must be a string, got {type(value).__name__}")
    return value


def _score(data: dict, key: str) -> int:
    value = data[key]
    # bool is an int subclass but never a valid score
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"Field '{key}' must be a number, got {type(value).__name__}")
    return max(0, min(100, round(value)))


def split_data_url(image: str) -> tuple[str, str]:
    """Split an image payload into (mime type, base64 data).

    Accepts both `data:image/png;base64,...` URLs and bare base64 text,
    which is assumed to be JPEG.
    """
    match = _DATA_URL_PATTERN.match(image.strip())
    if match:
        return match.group("mime"), match.group("data")
    return "image/jpeg", image.strip()


def parse_chart_reading(data: dict, profile: Profile) -> ChartReading:
    """Build a ChartReading from the LLM's JSON; the sun sign comes from the calendar.

    Raises:
        ValueError: If required keys are missing or have the wrong type.
    """
    missing_keys = CHART_REQUIRED_KEYS - set(data.keys())
    if missing_keys:
        logger.error("Chart reading missing keys: %s", missing_keys)
        raise ValueError(f"Chart reading missing required keys: {missing_keys}")

    for key in CHART_OPTIONAL_KEYS - set(data.keys()):
        logger.warning("Chart reading missing optional field: %s", key)

    computed = sun_sign(profile.birth_date)
    if computed is None:
        supplied = _require_text(data, "sunSign")
        try:
            computed = ZodiacSign(supplied.strip().title())
        except ValueError as e:
            raise ValueError(
                f"Cannot determine sun sign for birth date {profile.birth_date!r}"
            ) from e
    elif str(data["sunSign"]).strip().lower() != computed.value.lower():
        logger.warning(
            "Model suggested sun sign %s, using calendar sign %s",
            data["sunSign"],
            computed.value,
        )

    return ChartReading(
        sun_sign=computed,
        moon_sign=_require_text(data, "moonSign"),
        ascendant=_require_text(data, "ascendant"),
        prediction=_require_text(data, "prediction"),
        power_word=_require_text(data, "powerWord"),
        lucky_color=str(data.get("luckyColor") or ""),
        compatibility_note=str(data.get("compatibilityNote") or ""),
    )


def parse_palm_reading(data: dict) -> PalmReading:
    """Build a PalmReading from the LLM's JSON, clamping scores to 0-100.

    Raises:
        ValueError: If required keys are missing or have the wrong type.
    """
    missing_keys = set(PALM_SCORE_KEYS + PALM_TEXT_KEYS) - set(data.keys())
    if missing_keys:
        logger.error("Palm reading missing keys: %s", missing_keys)
        raise ValueError(f"Palm reading missing required keys: {missing_keys}")

    if "dominantHandPrediction" not in data:
        logger.warning("Palm reading missing optional field: dominantHandPrediction")

    return PalmReading(
        love_score=_score(data, "loveScore"),
        health_score=_score(data, "healthScore"),
        wisdom_score=_score(data, "wisdomScore"),
        career_score=_score(data, "careerScore"),
        love_text=_require_text(data, "loveText"),
        health_text=_require_text(data, "healthText"),
        wisdom_text=_require_text(data, "wisdomText"),
        career_text=_require_text(data, "careerText"),
        summary=_require_text(data, "summary"),
        dominant_hand_prediction=str(data.get("dominantHandPrediction") or ""),
    )


class ReadingGenerator:
    """Generates chart and palm readings with a single LLM call each."""

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        llm=None,
        geocode_api_key: str | None = None,
    ) -> None:
        self._llm = llm if llm is not None else google.LLM(model=model)
        self._geocode_api_key = geocode_api_key

    async def _complete(self, chat_ctx: ChatContext) -> str:
        # LLM.chat() returns an LLMStream; iterate to collect full text
        stream = self._llm.chat(chat_ctx=chat_ctx)
        chunks = []
        try:
            async for text in stream.to_str_iterable():
                chunks.append(text)
        finally:
            await stream.aclose()
        return "".join(chunks)

    async def _chart_prompt(self, profile: Profile) -> str:
        coordinates = ""
        coords = await geocode_place(profile.birth_place, self._geocode_api_key)
        if coords:
            coordinates = f" (lat {coords[0]:.4f}, lon {coords[1]:.4f})"

        return render_prompt(
            "chart.md",
            gender=profile.gender.value if profile.gender else "person",
            birth_date=profile.birth_date,
            birth_time=profile.birth_time or "Unknown Time",
            birth_place=profile.birth_place,
            coordinates=coordinates,
            goals=", ".join(goal.value for goal in profile.goals) or "None given",
            relationship_status=(
                profile.relationship_status.value
                if profile.relationship_status
                else "Unknown"
            ),
            element=profile.element.value if profile.element else "None",
            favorite_color=profile.favorite_color or "None",
        )

    async def generate_chart(self, profile: Profile) -> ChartReading:
        """Generate a birth chart reading for a profile.

        Raises:
            ValueError: If the LLM output is not valid JSON or has the wrong shape.
        """
        chat_ctx = ChatContext()
        chat_ctx.add_message(role="user", content=await self._chart_prompt(profile))

        response_text = await self._complete(chat_ctx)
        reading = parse_chart_reading(_extract_json(response_text), profile)
        logger.info("Chart reading generated (sun sign %s)", reading.sun_sign.value)
        return reading

    async def analyze_palm(self, image: str) -> PalmReading:
        """Generate a palm reading from a base64 image or data URL.

        Raises:
            ValueError: If the image is empty or the LLM output has the wrong shape.
        """
        mime_type, data = split_data_url(image)
        if not data:
            raise ValueError("Palm image is empty")

        chat_ctx = ChatContext()
        chat_ctx.add_message(
            role="user",
            content=[
                ImageContent(image=f"data:{mime_type};base64,{data}", mime_type=mime_type),
                load_prompt("palm.md"),
            ],
        )

        response_text = await self._complete(chat_ctx)
        reading = parse_palm_reading(_extract_json(response_text))
        logger.info("Palm reading generated")
        return reading
