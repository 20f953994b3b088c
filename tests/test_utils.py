import pytest

from wayther.errors import ConfigError
from wayther.services.config_loader import UserConfig
from wayther.utils.emoji import UNKNOWN_EMOJI, get_emoji, populate_emojis
from wayther.utils.validation import validate_config, validate_forecast_hours, validate_output


def test_get_emoji():
    assert get_emoji(1003) == '⛅'
    assert get_emoji(9999) == UNKNOWN_EMOJI == '❓'
    assert get_emoji(None) == '❓'


def test_populate_emojis_tolerates_partial_payloads():
    data = {'current': {'condition': {'code': 1000}}, 'forecast': {'forecastday': [{'hour': [{}]}]}}

    populate_emojis(data)

    assert data['current']['condition']['emoji'] == '☀️'
    assert data['forecast']['forecastday'][0]['hour'] == [{}]


@pytest.mark.parametrize('output', ['table', 'json'])
def test_valid_outputs(output):
    assert validate_output(output) == output


def test_invalid_output():
    with pytest.raises(ConfigError, match="Invalid output format 'xml'"):
        validate_output('xml')


@pytest.mark.parametrize('hours', [-1, 49, '4', True])
def test_invalid_forecast_hours(hours):
    with pytest.raises(ConfigError):
        validate_forecast_hours(hours)


def test_validate_config():
    user_config = UserConfig(location='Brussels')
    user_config.set_defaults()

    assert validate_config(user_config) is user_config


def test_blank_location():
    user_config = UserConfig(location='   ')
    user_config.set_defaults()

    with pytest.raises(ConfigError, match='no location provided'):
        validate_config(user_config)
