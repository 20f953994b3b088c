import json
from dataclasses import asdict
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterator, Optional, Tuple

from jinja2 import Environment, StrictUndefined, TemplateError
from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from wayther.entities import HourlyForecast, Weather
from wayther.errors import FormatError

ERROR_TEXT = "N/A ☢"

_env = Environment(undefined=StrictUndefined, autoescape=False, keep_trailing_newline=False)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def render_template(name: str, source: str, data) -> str:
    """Render ``source`` with the fields of the dataclass ``data``."""
    try:
        return _env.from_string(source).render(**asdict(data))
    except TemplateError as e:
        raise FormatError(f"error rendering {name} template: {e}") from e


def upcoming_hours(
        weather: Weather, hours: int, now_func: Optional[Callable[[], datetime]] = None,
) -> Iterator[Tuple[datetime, HourlyForecast]]:
    """Yield up to ``hours`` forecast hours that are not in the past."""
    if hours <= 0:
        return

    now = (now_func or _utcnow)()
    count = 0
    for hour in weather.hourly_forecast:
        if count >= hours:
            break
        when = datetime.fromtimestamp(hour.time_epoch, tz=timezone.utc)
        if when < now:
            continue

        yield when, hour
        count += 1

        if when > now + timedelta(hours=23):
            break


def _clock(when: datetime) -> str:
    return when.astimezone().strftime('%H:%M')


def format_table(weather: Weather, config, now_func: Optional[Callable[[], datetime]] = None) -> str:
    table = Table(box=box.SQUARE, show_header=False)
    table.add_column(no_wrap=True)

    show_forecast = config.forecast_hours > 0
    table.add_row("Current:", end_section=True)
    table.add_row(
        Text(render_template('table-current', config.current_tmpl, weather.current)),
        end_section=show_forecast,
    )

    if show_forecast:
        table.add_row("Hourly Forecast:", end_section=True)
        for when, hour in upcoming_hours(weather, config.forecast_hours, now_func):
            line = render_template('table-hourly', config.forecast_tmpl, hour)
            table.add_row(Text(f"{_clock(when)} : {line}"))

    console = Console(width=120, color_system=None, force_terminal=False, highlight=False)
    with console.capture() as capture:
        console.print(table)
    return capture.get().rstrip('\n')


def format_json(weather: Weather, config, now_func: Optional[Callable[[], datetime]] = None) -> str:
    text = render_template('json-text', config.short_tmpl, weather.current)
    tooltip = [
        f" {_clock(when)}: {render_template('json-tooltip', config.forecast_tmpl, hour)} "
        for when, hour in upcoming_hours(weather, config.forecast_hours, now_func)
    ]
    return json.dumps({'text': text, 'tooltip': '\r'.join(tooltip)}, ensure_ascii=False, separators=(',', ':'))


def format_error(error) -> str:
    """Status-bar friendly blob shown instead of the forecast when something fails."""
    return json.dumps(
        {'text': ERROR_TEXT, 'tooltip': f" error fetching weather: {error} "},
        ensure_ascii=False, separators=(',', ':'),
    )


def format_output(weather: Weather, config, now_func: Optional[Callable[[], datetime]] = None) -> str:
    if config.output == 'json':
        return format_json(weather, config, now_func)
    return format_table(weather, config, now_func)
