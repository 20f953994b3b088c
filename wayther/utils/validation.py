from wayther.errors import ConfigError

OUTPUT_FORMATS = ('table', 'json')
MAX_FORECAST_HOURS = 48


def validate_output(output: str) -> str:
    if output not in OUTPUT_FORMATS:
        raise ConfigError(f"Invalid output format {output!r}, expected one of: {', '.join(OUTPUT_FORMATS)}")
    return output


def validate_forecast_hours(hours: int) -> int:
    # bool is an int subclass, reject it explicitly
    if isinstance(hours, bool) or not isinstance(hours, int):
        raise ConfigError(f"forecastHours must be an integer, got {hours!r}")
    if not (0 <= hours <= MAX_FORECAST_HOURS):
        raise ConfigError(f"forecastHours must be between 0 and {MAX_FORECAST_HOURS}")
    return hours


def validate_location(location: str) -> str:
    if not location or not location.strip():
        raise ConfigError(
            "no location provided. Please provide a location as an argument or set a default in config.json"
        )
    return location


def validate_config(config):
    """
    Проверка итоговой конфигурации перед запросом погоды.

    Raises:
        ConfigError: если одно из полей некорректно
    """
    validate_output(config.output)
    validate_forecast_hours(config.forecast_hours)
    validate_location(config.location)
    return config
