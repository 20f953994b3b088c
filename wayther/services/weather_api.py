import logging
from datetime import timedelta
from typing import Dict, Optional

import requests

from wayther import config
from wayther.entities import HourlyForecast, Weather, WeatherCurrent
from wayther.errors import WeatherAPIError
from wayther.utils.cache import Cache
from wayther.utils.emoji import populate_emojis

logger = logging.getLogger(__name__)


class WeatherAPI:
    """Client for the WeatherAPI forecast endpoint with an optional on-disk cache"""

    def __init__(
        self,
        api_key: str,
        cache: Optional[Cache] = None,
        base_url: str = config.WEATHER_API_URL,
        timeout: float = config.WEATHER_API_TIMEOUT,
        days: int = config.FORECAST_DAYS,
        max_age: timedelta = timedelta(minutes=config.CACHE_TTL_MINUTES),
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.cache = cache
        self.base_url = base_url
        self.timeout = timeout
        self.days = days
        self.max_age = max_age
        self.session = session or requests.Session()

    def _read_from_cache(self, location: str) -> Optional[Dict]:
        if self.cache is None:
            return None

        entry, found = self.cache.get(location)
        if not found:
            return None
        if entry.is_stale(self.max_age, self.cache.now()):
            logger.debug(f"Cache expired for {location!r}")
            return None
        return entry.weather

    def _save_to_cache(self, location: str, data: Dict):
        if self.cache is None:
            return

        try:
            self.cache.set(location, data)
        except OSError as e:
            logger.warning(f"Cache write failed: {e}")

    def get_weather_data(self, location: str) -> Dict:
        """
        Fetch the forecast for a location, serving a fresh cached copy when there is one.

        Args:
            location: Anything WeatherAPI accepts as ``q`` (city, "lat,lon", postcode)

        Returns:
            The decoded forecast.json payload with ``condition.emoji`` filled in

        Raises:
            WeatherAPIError: on transport errors, non-200 responses or invalid JSON
        """
        cached_data = self._read_from_cache(location)
        if cached_data is not None:
            logger.info(f"Using cached data for {location!r}")
            return cached_data

        params = {
            'key': self.api_key,
            'q': location,
            'days': self.days,
            'aqi': 'no',
            'alerts': 'no',
        }

        try:
            response = self.session.get(self.base_url, params=params, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            logger.error("WeatherAPI timeout")
            raise WeatherAPIError("request to WeatherAPI timed out") from e
        except requests.exceptions.RequestException as e:
            logger.error(f"WeatherAPI error: {e}")
            raise WeatherAPIError("failed to make HTTP request") from e

        if response.status_code != 200:
            logger.error(f"WeatherAPI returned {response.status_code}: {response.text[:500]}")
            raise WeatherAPIError(
                f"API request failed with status code {response.status_code}: {response.reason}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise WeatherAPIError(f"failed to decode API response: {e}") from e

        populate_emojis(data)
        self._save_to_cache(location, data)
        return data

    def extract_weather(self, weather_data: Dict) -> Weather:
        """Reduce a raw forecast payload to the fields the templates use."""
        location = weather_data.get('location') or {}
        current = weather_data.get('current') or {}
        condition = current.get('condition') or {}

        hourly = []
        for day in (weather_data.get('forecast') or {}).get('forecastday') or []:
            for hour in day.get('hour') or []:
                hour_condition = hour.get('condition') or {}
                hourly.append(HourlyForecast(
                    time_epoch=int(hour.get('time_epoch', 0)),
                    emoji=hour_condition.get('emoji', ''),
                    temp_c=hour.get('temp_c'),
                    feelslike_c=hour.get('feelslike_c'),
                ))

        return Weather(
            current=WeatherCurrent(
                location=location.get('name', 'Unknown'),
                country=location.get('country', ''),
                emoji=condition.get('emoji', ''),
                temp_c=current.get('temp_c'),
            ),
            hourly_forecast=hourly,
        )
