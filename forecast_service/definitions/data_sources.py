"""
This module defines data sources for the application.
"""

from enum import Enum
from typing import Dict, Literal


class ApiVersion(Enum):
    V1 = "v1"


UvUnavailable = Literal["unavailable"]
UV_UNAVAILABLE: UvUnavailable = "unavailable"


class ConditionCode(str, Enum):
    """Enumeration of weather conditions driving icon and label selection."""

    CLEAR = "Clear"
    CLOUDS = "Clouds"
    RAIN = "Rain"
    THUNDERSTORM = "Thunderstorm"
    OTHER = "Other"
    UNKNOWN = "Unknown"


class RequestState(str, Enum):
    """Lifecycle of a forecast request."""

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


# OpenWeatherMap `weather[].main` groups. Anything else non-empty is OTHER.
OWM_CONDITIONS: Dict[str, ConditionCode] = {
    "clear": ConditionCode.CLEAR,
    "clouds": ConditionCode.CLOUDS,
    "rain": ConditionCode.RAIN,
    "drizzle": ConditionCode.RAIN,
    "thunderstorm": ConditionCode.THUNDERSTORM,
}

# WMO weather interpretation codes as returned by Open-Meteo.
WMO_CONDITIONS: Dict[int, ConditionCode] = {
    0: ConditionCode.CLEAR,
    1: ConditionCode.CLEAR,
    2: ConditionCode.CLOUDS,
    3: ConditionCode.CLOUDS,
    45: ConditionCode.OTHER,
    48: ConditionCode.OTHER,
    **{code: ConditionCode.RAIN for code in (51, 53, 55, 56, 57)},
    **{code: ConditionCode.RAIN for code in (61, 63, 65, 66, 67)},
    **{code: ConditionCode.OTHER for code in (71, 73, 75, 77)},
    **{code: ConditionCode.RAIN for code in (80, 81, 82)},
    85: ConditionCode.OTHER,
    86: ConditionCode.OTHER,
    95: ConditionCode.THUNDERSTORM,
    96: ConditionCode.THUNDERSTORM,
    99: ConditionCode.THUNDERSTORM,
}
