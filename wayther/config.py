import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _user_config_dir() -> Path:
    xdg = os.getenv('XDG_CONFIG_HOME')
    return Path(xdg) if xdg else Path.home() / '.config'


WEATHER_API_URL = os.getenv('WEATHER_API_URL', 'https://api.weatherapi.com/v1/forecast.json')
WEATHER_API_TIMEOUT = float(os.getenv('WEATHER_API_TIMEOUT', 10))
FORECAST_DAYS = int(os.getenv('FORECAST_DAYS', 2))
CACHE_TTL_MINUTES = int(os.getenv('CACHE_TTL_MINUTES', 30))
CONFIG_DIR = Path(os.getenv('WAYTHER_CONFIG_DIR', _user_config_dir() / 'wayther'))
LOG_DIR = os.getenv('LOG_DIR')
