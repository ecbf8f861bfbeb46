from dataclasses import dataclass, field
from enum import Enum, IntEnum


class Gender(Enum):
    FEMALE = "Female"
    MALE = "Male"
    NON_BINARY = "Non-binary"


class RelationshipStatus(Enum):
    RELATIONSHIP = "In a relationship"
    BROKE_UP = "Just broke up"
    ENGAGED = "Engaged"
    MARRIED = "Married"
    LOOKING = "Looking for a soulmate"
    SINGLE = "Single"


class Goal(Enum):
    FAMILY = "Family harmony"
    CAREER = "Career growth"
    HEALTH = "Physical vitality"
    MARRIAGE = "Finding a spouse"
    TRAVEL = "World exploration"
    EDUCATION = "Higher learning"
    FRIENDS = "Social connections"
    CHILDREN = "Starting a family"


class Element(Enum):
    EARTH = "Earth"
    WATER = "Water"
    FIRE = "Fire"
    AIR = "Air"


class ZodiacSign(Enum):
    ARIES = "Aries"
    TAURUS = "Taurus"
    GEMINI = "Gemini"
    CANCER = "Cancer"
    LEO = "Leo"
    VIRGO = "Virgo"
    LIBRA = "Libra"
    SCORPIO = "Scorpio"
    SAGITTARIUS = "Sagittarius"
    CAPRICORN = "Capricorn"
    AQUARIUS = "Aquarius"
    PISCES = "Pisces"


class Step(IntEnum):
    """Quiz screens in the order they are shown."""

    LANDING = 0
    BIRTH_DATE = 1
    BIRTH_TIME = 2
    BIRTH_PLACE = 3
    PROCESSING_CHART = 4
    RELATIONSHIP = 5
    GOALS = 6
    COLOR = 7
    ELEMENT = 8
    PROCESSING_ACCURACY = 9
    PALM_INTRO = 10
    PALM_UPLOAD = 11
    PROCESSING_PALM = 12
    RESULTS_PREVIEW = 13
    FULL_REPORT = 14


FAVORITE_COLORS = ["Red", "Yellow", "Blue", "Orange", "Green"]


@dataclass
class Profile:
    """Answers collected by the quiz for the current session."""

    gender: Gender | None = None
    birth_date: str = ""  # YYYY-MM-DD
    birth_time: str | None = None  # HH:MM
    birth_place: str = ""
    relationship_status: RelationshipStatus | None = None
    goals: list[Goal] = field(default_factory=list)
    favorite_color: str | None = None
    element: Element | None = None
    palm_image: str | None = None  # Base64, optionally as a data: URL


@dataclass(frozen=True)
class ChartReading:
    sun_sign: ZodiacSign
    moon_sign: str
    ascendant: str
    prediction: str
    power_word: str
    lucky_color: str = ""
    compatibility_note: str = ""


@dataclass(frozen=True)
class PalmReading:
    love_score: int
    health_score: int
    wisdom_score: int
    career_score: int
    love_text: str
    health_text: str
    wisdom_text: str
    career_text: str
    summary: str
    dominant_hand_prediction: str = ""
