from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class WeatherCurrent:
    """Current conditions as exposed to the output templates."""

    location: str
    country: str
    emoji: str
    temp_c: float


@dataclass(frozen=True)
class HourlyForecast:
    time_epoch: int
    emoji: str
    temp_c: float
    feelslike_c: float


@dataclass(frozen=True)
class Weather:
    current: WeatherCurrent
    hourly_forecast: List[HourlyForecast] = field(default_factory=list)


__all__ = ["WeatherCurrent", "HourlyForecast", "Weather"]
