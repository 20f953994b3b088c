import getpass
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from wayther import config
from wayther.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = 'config.json'

DEFAULT_OUTPUT = 'table'
DEFAULT_SHORT_TMPL = '{{ emoji }} {{ temp_c }}°'
DEFAULT_CURRENT_TMPL = '{{ location }}, {{ country }}: {{ emoji }}  {{ temp_c }}°'
DEFAULT_FORECAST_TMPL = '{{ emoji }} {{ temp_c }}° [{{ feelslike_c }}°]'
DEFAULT_FORECAST_HOURS = 4

# attribute name -> key in config.json
_JSON_KEYS = {
    'api_key': 'apiKey',
    'location': 'location',
    'logger': 'logger',
    'output': 'output',
    'short_tmpl': 'shortTmpl',
    'current_tmpl': 'currentTmpl',
    'forecast_tmpl': 'forecastTmpl',
    'forecast_hours': 'forecastHours',
}

# expected JSON type per attribute, forecastHours range is checked by validate_forecast_hours
_JSON_TYPES = {
    'api_key': str,
    'location': str,
    'logger': bool,
    'output': str,
    'short_tmpl': str,
    'current_tmpl': str,
    'forecast_tmpl': str,
    'forecast_hours': int,
}

_TYPE_NAMES = {str: 'a string', bool: 'a boolean', int: 'an integer'}


@dataclass
class UserConfig:
    """Contents of a wayther config.json file."""

    api_key: str = ''
    location: str = ''
    logger: bool = False
    output: str = ''
    short_tmpl: str = ''
    current_tmpl: str = ''
    forecast_tmpl: str = ''
    forecast_hours: Optional[int] = None

    @classmethod
    def from_dict(cls, data: dict) -> 'UserConfig':
        if not isinstance(data, dict):
            raise ConfigError("configuration must be a JSON object")
        # null is treated as an absent key
        values = {attr: data[key] for attr, key in _JSON_KEYS.items() if data.get(key) is not None}
        for attr, value in values.items():
            if not isinstance(value, _JSON_TYPES[attr]):
                raise ConfigError(f"{_JSON_KEYS[attr]} must be {_TYPE_NAMES[_JSON_TYPES[attr]]}, got {value!r}")
        return cls(**values)

    def to_dict(self) -> dict:
        data = {}
        for attr, key in _JSON_KEYS.items():
            value = getattr(self, attr)
            # empty strings and unset hours stay out of the file, logger is always written
            if value in ('', None) and attr != 'logger':
                continue
            data[key] = value
        return data

    def set_defaults(self):
        if not self.output:
            self.output = DEFAULT_OUTPUT
        if not self.short_tmpl:
            self.short_tmpl = DEFAULT_SHORT_TMPL
        if not self.current_tmpl:
            self.current_tmpl = DEFAULT_CURRENT_TMPL
        if not self.forecast_tmpl:
            self.forecast_tmpl = DEFAULT_FORECAST_TMPL
        if self.forecast_hours is None:
            self.forecast_hours = DEFAULT_FORECAST_HOURS

    def merge(self, other: 'UserConfig'):
        """Overlay a custom config on top of this one."""
        for attr in ('api_key', 'location', 'output', 'short_tmpl', 'current_tmpl', 'forecast_tmpl'):
            value = getattr(other, attr)
            if value:
                setattr(self, attr, value)
        self.logger = other.logger
        if other.forecast_hours is not None:
            self.forecast_hours = other.forecast_hours


@dataclass
class ConfigPath:
    default: Path
    custom: Optional[Path] = None

    def is_custom(self) -> bool:
        return self.custom is not None


def user_config_path(custom=None) -> ConfigPath:
    return ConfigPath(
        default=config.CONFIG_DIR / CONFIG_FILE_NAME,
        custom=Path(custom) if custom else None,
    )


def load_config_from_file(path) -> UserConfig:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise ConfigError(f"Cannot read configuration {path}: {e}") from e
    return UserConfig.from_dict(data)


def _prompt_non_empty(prompt: str, read: Callable[[str], str], error: str) -> str:
    while True:
        value = read(prompt).strip()
        if value:
            return value
        print(error)


def create_config(
        path,
        is_default: bool,
        input_func: Callable[[str], str] = input,
        secret_func: Callable[[str], str] = getpass.getpass,
) -> UserConfig:
    """
    Interactively ask for the settings and write a new config file.

    Args:
        path: Where the config file is created
        is_default: The default config needs an API key, custom ones only a location
        input_func: Reads the location
        secret_func: Reads the API key without echoing it

    Returns:
        The created configuration
    """
    path = Path(path)
    user_config = UserConfig()

    try:
        path.parent.mkdir(mode=0o750, parents=True, exist_ok=True)

        if is_default:
            user_config.api_key = _prompt_non_empty(
                'Enter WeatherAPI Key: ', secret_func,
                'API Key cannot be empty for default configuration.')
        user_config.location = _prompt_non_empty(
            'Enter location: ', input_func, 'Location cannot be empty.')

        with open(path, 'w', encoding='utf-8') as f:
            json.dump(user_config.to_dict(), f, indent=2, ensure_ascii=False)
    except (OSError, EOFError) as e:
        raise ConfigError(f"Cannot create configuration {path}: {e}") from e

    print(f"Created configuration file: {path}")
    logger.info(f"Created configuration file {path}")
    return user_config


def load_or_create_config(path, is_default: bool, **prompt_kwargs) -> UserConfig:
    if Path(path).exists():
        return load_config_from_file(path)
    return create_config(path, is_default, **prompt_kwargs)


def load_config(config_path: ConfigPath, **prompt_kwargs) -> UserConfig:
    """
    Load the default configuration, creating it on first run, and merge
    the custom one over it when ``config_path.custom`` is set.
    """
    user_config = load_or_create_config(config_path.default, True, **prompt_kwargs)
    user_config.set_defaults()

    if config_path.is_custom():
        custom_config = load_or_create_config(config_path.custom, False, **prompt_kwargs)
        user_config.merge(custom_config)

    return user_config
