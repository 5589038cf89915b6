"""
Value types shared by the advice pipeline.

Requests, weather data and results are small immutable records so a single
advice call can pass them between the detector, enricher, remote client and
local advisor without any of them mutating shared state.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple


class Topic(str, Enum):
    PESTS = "pests"
    WATER = "water"
    FERTILIZER = "fertilizer"
    WEATHER = "weather"
    MARKET = "market"


class Language(str, Enum):
    HINDI = "hindi"      # primary
    ENGLISH = "english"  # secondary


class AdviceSource(str, Enum):
    REMOTE = "remote"
    LOCAL = "local"


def _to_float(value: Any) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class WeatherSnapshot:
    condition: str
    temp_c: float
    humidity: Optional[float] = None
    wind_kph: Optional[float] = None
    precip_mm: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Any) -> Optional["WeatherSnapshot"]:
        """
        Build a snapshot from a client-supplied dict.

        Accepts both the nested ``{"condition": {"text": ...}}`` shape and a
        flat ``{"condition": "..."}``. Returns None when no usable temperature
        or condition is present.
        """
        if not isinstance(data, Mapping):
            return None

        cond = data.get("condition")
        if isinstance(cond, Mapping):
            cond = cond.get("text")
        cond = str(cond).strip() if cond else ""

        temp_c = _to_float(data.get("temp_c"))
        if temp_c is None or not cond:
            return None

        humidity = _to_float(data.get("humidity"))
        if humidity is not None:
            humidity = min(max(humidity, 0.0), 100.0)

        return cls(
            condition=cond,
            temp_c=temp_c,
            humidity=humidity,
            wind_kph=_to_float(data.get("wind_kph")),
            precip_mm=_to_float(data.get("precip_mm")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "condition": self.condition,
            "temp_c": self.temp_c,
            "humidity": self.humidity,
            "wind_kph": self.wind_kph,
            "precip_mm": self.precip_mm,
        }


@dataclass(frozen=True)
class ForecastDay:
    date: str
    max_temp_c: float
    min_temp_c: float
    condition: str
    chance_of_rain: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "max_temp_c": self.max_temp_c,
            "min_temp_c": self.min_temp_c,
            "condition": self.condition,
            "chance_of_rain": self.chance_of_rain,
        }


@dataclass(frozen=True)
class WeatherReport:
    location: str
    current: WeatherSnapshot
    country: str = ""
    forecast: Tuple[ForecastDay, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "location": self.location,
            "country": self.country,
            "current": self.current.to_dict(),
            "forecast": [d.to_dict() for d in self.forecast],
        }


@dataclass(frozen=True)
class AdviceContext:
    weather: Optional[WeatherSnapshot] = None
    location: Optional[str] = None
    crop: Optional[str] = None
    forecast: Tuple[ForecastDay, ...] = ()
    country: Optional[str] = None


@dataclass(frozen=True)
class AdviceRequest:
    query: str
    context: AdviceContext = field(default_factory=AdviceContext)


@dataclass(frozen=True)
class GenerationConfig:
    temperature: float = 0.2
    top_p: float = 0.95
    max_output_tokens: int = 1000


@dataclass
class AdviceResult:
    advice: str
    source: AdviceSource
    model: str
    language: Language
    topics: List[Topic] = field(default_factory=list)
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload = {
            "advice": self.advice,
            "source": self.source.value,
            "model": self.model,
            "language": self.language.value,
            "topics": [t.value for t in self.topics],
        }
        if self.error:
            payload["error"] = self.error
        return payload
