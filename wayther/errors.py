class WaytherError(RuntimeError):
    """Base error for failures reported to the user."""


class ConfigError(WaytherError):
    """Raised when the configuration cannot be loaded, created or validated."""


class WeatherAPIError(WaytherError):
    """Raised when the forecast cannot be fetched or decoded."""


class FormatError(WaytherError):
    """Raised when an output template cannot be rendered."""
