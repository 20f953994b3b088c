import json
from datetime import datetime, timedelta, timezone

import pytest

from wayther.entities import HourlyForecast, Weather, WeatherCurrent
from wayther.errors import FormatError
from wayther.services import formatter
from wayther.services.config_loader import UserConfig
from wayther.services.weather_api import WeatherAPI
from wayther.utils.emoji import populate_emojis


def hhmm(epoch):
    return datetime.fromtimestamp(epoch, tz=timezone.utc).astimezone().strftime('%H:%M')


@pytest.fixture
def weather(sample_response):
    return WeatherAPI('test_api_key').extract_weather(populate_emojis(sample_response))


def make_config(**kwargs):
    user_config = UserConfig(location='Brussels', **kwargs)
    user_config.set_defaults()
    return user_config


class TestUpcomingHours:
    def test_skips_past_hours_and_stops_at_limit(self, weather, sample_now):
        epochs = [hour.time_epoch for _, hour in formatter.upcoming_hours(weather, 4, sample_now)]

        assert epochs == [1700002800, 1700006400, 1700010000, 1700013600]

    def test_stops_after_first_hour_beyond_a_day(self, weather, sample_now):
        epochs = [hour.time_epoch for _, hour in formatter.upcoming_hours(weather, 48, sample_now)]

        assert epochs[-1] == 1700092800
        assert len(epochs) == 6

    def test_zero_hours(self, weather, sample_now):
        assert list(formatter.upcoming_hours(weather, 0, sample_now)) == []

    def test_yields_aware_datetimes(self, weather, sample_now):
        when, hour = next(formatter.upcoming_hours(weather, 1, sample_now))

        assert when == datetime.fromtimestamp(hour.time_epoch, tz=timezone.utc)

    def test_hour_equal_to_now_is_kept(self, sample_now):
        now = sample_now()
        weather = Weather(
            current=WeatherCurrent('X', 'Y', '', 0.0),
            hourly_forecast=[
                HourlyForecast(int((now - timedelta(seconds=1)).timestamp()), '', 0.0, 0.0),
                HourlyForecast(int(now.timestamp()), '', 1.0, 1.0),
            ],
        )

        hours = [hour.temp_c for _, hour in formatter.upcoming_hours(weather, 5, sample_now)]

        assert hours == [1.0]


class TestJSON:
    def test_without_forecast(self, weather, sample_now):
        output = formatter.format_json(weather, make_config(forecast_hours=0), sample_now)

        assert output == '{"text":"⛅ 1.3°","tooltip":""}'

    def test_tooltip_rows(self, weather, sample_now):
        output = formatter.format_json(weather, make_config(forecast_hours=2), sample_now)

        data = json.loads(output)
        assert data['text'] == '⛅ 1.3°'
        assert data['tooltip'] == (
            f" {hhmm(1700002800)}: ☀️ 1.1° [-2.2°] \r"
            f" {hhmm(1700006400)}: 🌫️ 0.9° [-2.5°] "
        )
        assert '\\r' in output

    def test_custom_templates(self, weather, sample_now):
        user_config = make_config(short_tmpl='{{ location }} {{ temp_c|round|int }}C', forecast_hours=0)

        data = json.loads(formatter.format_json(weather, user_config, sample_now))

        assert data['text'] == 'Brussels 1C'


class TestTable:
    def test_sections(self, weather, sample_now):
        output = formatter.format_table(weather, make_config(forecast_hours=4), sample_now)

        assert 'Current:' in output
        assert 'Brussels, Belgium: ⛅  1.3°' in output
        assert 'Hourly Forecast:' in output
        assert f'{hhmm(1700002800)} : ☀️ 1.1° [-2.2°]' in output
        assert f'{hhmm(1700013600)} : 🌦️ 0.8° [-2.6°]' in output
        assert f'{hhmm(1700017200)} :' not in output

    def test_without_forecast(self, weather, sample_now):
        output = formatter.format_table(weather, make_config(forecast_hours=0), sample_now)

        assert 'Current:' in output
        assert 'Hourly Forecast:' not in output

    def test_brackets_are_not_markup(self, weather, sample_now):
        user_config = make_config(current_tmpl='[bold]{{ location }}[/bold]', forecast_hours=0)

        output = formatter.format_table(weather, user_config, sample_now)

        assert '[bold]Brussels[/bold]' in output

    def test_box_drawing(self, weather, sample_now):
        lines = formatter.format_table(weather, make_config(forecast_hours=1), sample_now).splitlines()

        assert lines[0].startswith('┌')
        assert lines[-1].startswith('└')
        assert sum(line.startswith('├') for line in lines) == 3


def test_format_output_dispatches_on_output(weather, sample_now):
    assert formatter.format_output(weather, make_config(output='json'), sample_now).startswith('{"text":')
    assert 'Current:' in formatter.format_output(weather, make_config(output='table'), sample_now)


@pytest.mark.parametrize('template', ['{{ humidity }}', '{{ emoji '])
def test_broken_template(weather, sample_now, template):
    with pytest.raises(FormatError, match='json-tooltip'):
        formatter.format_json(weather, make_config(forecast_tmpl=template, forecast_hours=1), sample_now)


def test_format_error():
    assert formatter.format_error('mock weather error') == (
        '{"text":"N/A ☢","tooltip":" error fetching weather: mock weather error "}'
    )
