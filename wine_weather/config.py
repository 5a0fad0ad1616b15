"""
Wine Weather - Configuration and Logging Setup

All environment variables and logging setup in one place.
"""
import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
ROOT_LOGGER_NAME = 'wine_weather'


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {'1', 'true', 'yes', 'on'}


@dataclass(frozen=True)
class Settings:
    """Server configuration loaded from environment."""

    server_name: str = 'wine-weather-server'
    log_level: str = 'INFO'
    log_dir: str = 'logs'
    log_to_file: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables (and a local .env file)."""
        load_dotenv()
        return cls(
            server_name=os.environ.get('WINE_WEATHER_SERVER_NAME', cls.server_name),
            log_level=os.environ.get('WINE_WEATHER_LOG_LEVEL', cls.log_level).upper(),
            log_dir=os.environ.get('WINE_WEATHER_LOG_DIR', cls.log_dir),
            log_to_file=_env_flag('WINE_WEATHER_LOG_TO_FILE'),
        )


def setup_logging(settings: Settings) -> logging.Logger:
    """Attach console (and optional file) handlers to the package logger."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(getattr(logging, settings.log_level, logging.INFO))

    formatter = logging.Formatter(LOG_FORMAT)

    # Re-running setup replaces handlers instead of duplicating output
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if settings.log_to_file:
        os.makedirs(settings.log_dir, exist_ok=True)
        file_handler = logging.FileHandler(os.path.join(settings.log_dir, 'wine_weather.log'))
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
