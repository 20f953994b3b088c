import argparse
import logging
import os
import sys
from datetime import timedelta
from logging.handlers import RotatingFileHandler, SysLogHandler
from typing import Optional

from wayther import __version__, config
from wayther.errors import WaytherError
from wayther.services import config_loader, formatter
from wayther.services.weather_api import WeatherAPI
from wayther.utils.cache import Cache
from wayther.utils.validation import validate_config

logger = logging.getLogger('wayther')

SYSLOG_ADDRESS = '/dev/log'


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='wayther',
        description='A command-line weather application.',
        epilog=(
            f"Default configuration path: {config.CONFIG_DIR / config_loader.CONFIG_FILE_NAME}. "
            "If no configuration file is found, you will be prompted to create one interactively. "
            "The 'logger' key in the config enables syslog output."
        ),
    )
    parser.add_argument('location', nargs='?',
                        help='City or location to get weather for, defaults to the configured one')
    parser.add_argument('-c', '--config', metavar='PATH',
                        help='Custom configuration file merged over the default one')
    parser.add_argument('-o', '--output', choices=('table', 'json'),
                        help='Output format')
    parser.add_argument('--json', dest='output', action='store_const', const='json',
                        help='Shorthand for --output json')
    parser.add_argument('--forecast-hours', type=int, metavar='N',
                        help='Number of hourly forecast rows to show')
    parser.add_argument('--clean-cache', action='store_true',
                        help='Drop every cached response before fetching')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Log debug messages to stderr')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def setup_logging(verbose: bool = False, log_dir: Optional[str] = config.LOG_DIR):
    """Configure logging system"""
    logger.setLevel(logging.DEBUG)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stream = logging.StreamHandler(sys.stderr)
    stream.setLevel(logging.DEBUG if verbose else logging.WARNING)
    stream.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
    logger.addHandler(stream)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        handler = RotatingFileHandler(
            os.path.join(log_dir, 'wayther.log'), maxBytes=1000000, backupCount=5
        )
        handler.setLevel(logging.INFO)
        handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
        ))
        logger.addHandler(handler)


def enable_syslog(address=SYSLOG_ADDRESS):
    # SysLogHandler ignores a missing unix socket, check for it up front
    if isinstance(address, str) and not os.path.exists(address):
        logger.warning(f"Failed to connect to syslog: {address} does not exist")
        return
    try:
        handler = SysLogHandler(address=address, facility=SysLogHandler.LOG_DAEMON)
    except OSError as e:
        logger.warning(f"Failed to connect to syslog: {e}")
        return
    handler.setLevel(logging.INFO)
    # syslog adds its own timestamp and hostname
    handler.setFormatter(logging.Formatter('wayther: %(message)s'))
    logger.addHandler(handler)


def open_cache(config_path) -> Optional[Cache]:
    try:
        return Cache(config_path)
    except (OSError, ValueError) as e:
        logger.error(f"Cache unavailable, fetching without it: {e}")
        return None


def stdout_is_terminal() -> bool:
    return sys.stdout.isatty()


def resolve_config(args, config_path, **prompt_kwargs):
    user_config = config_loader.load_config(config_path, **prompt_kwargs)

    if args.location:
        user_config.location = args.location
    if args.output:
        user_config.output = args.output
    if args.forecast_hours is not None:
        user_config.forecast_hours = args.forecast_hours
    if not stdout_is_terminal():
        user_config.output = 'json'

    return validate_config(user_config)


def run_app(user_config, config_path, clean_cache=False, weather_api_factory=WeatherAPI, now_func=None) -> str:
    if user_config.logger:
        enable_syslog()

    cache = open_cache(config_path.default)
    if cache is not None and clean_cache:
        try:
            cache.clean(timedelta(0))
        except OSError as e:
            logger.warning(f"Cache clean failed: {e}")

    api = weather_api_factory(user_config.api_key, cache=cache)
    weather = api.extract_weather(api.get_weather_data(user_config.location))
    return formatter.format_output(weather, user_config, now_func)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    # until the config is loaded only the flags and the terminal decide
    output_json = args.output == 'json' or not stdout_is_terminal()
    try:
        config_path = config_loader.user_config_path(args.config)
        user_config = resolve_config(args, config_path)
        output_json = user_config.output == 'json'
        output = run_app(user_config, config_path, clean_cache=args.clean_cache)
    except WaytherError as e:
        if output_json:
            print(formatter.format_error(e))
            return 0
        logger.error(f"Application error: {e}")
        return 1

    print(output)
    return 0
