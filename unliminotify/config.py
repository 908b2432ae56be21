#!/usr/bin/env python3
"""
Configuration
Merges command-line flags, environment variables, an optional .env file and
an optional JSON config file into one immutable Config.

Precedence, highest first: flags, environment, .env, config file, defaults.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional, Tuple, Union

from .errors import ConfigError
from .listings_source import LISTINGS_XML_URL
from .notification_ledger import DEFAULT_NOTIFICATIONS_FILE

DEFAULT_CONFIG_FILENAME = ".unliminotify.json"
DEFAULT_ENV_FILE = ".env"
DEFAULT_CINEMA_ID = 1
DEFAULT_CONSOLE_LEVEL = "WARNING"
DEFAULT_FILE_LEVEL = "DEBUG"

# Config file keys and the environment variables that override them
ENV_KEYS = {
    "cinema_id": "CINEMA_ID",
    "notifications_file": "NOTIFICATIONS_FILE",
    "sms_numbers": "SMS_NUMBERS",
    "twilio_from": "TWILIO_FROM",
    "twilio_sid": "TWILIO_SID",
    "twilio_token": "TWILIO_TOKEN",
    "listings_url": "LISTINGS_URL",
}


@dataclass(frozen=True)
class Config:
    """Settings for one run, built once at startup"""

    cinema_id: int = DEFAULT_CINEMA_ID
    notifications_file: str = DEFAULT_NOTIFICATIONS_FILE
    sms_numbers: Tuple[str, ...] = ()
    twilio_from: str = ""
    twilio_sid: str = ""
    twilio_token: str = ""
    listings_url: str = LISTINGS_XML_URL
    disable_sms: bool = False
    verbose: bool = False
    console_level: str = DEFAULT_CONSOLE_LEVEL
    file_level: str = DEFAULT_FILE_LEVEL
    log_file: Optional[str] = None
    config_file_used: Optional[str] = None


def load_env_file(path: Union[str, Path] = DEFAULT_ENV_FILE) -> Dict[str, str]:
    """Read KEY=VALUE pairs from a .env file if it exists"""
    values = {}
    env_file = Path(path)
    if not env_file.exists():
        return values
    try:
        with open(env_file, "r") as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#") and "=" in line:
                    key, value = line.split("=", 1)
                    values[key.strip()] = value.strip().strip("\"'")
    except OSError as e:
        raise ConfigError(f"Unable to read {env_file}: {e}") from e
    return values


def load_config_file(path: Optional[str], required: bool) -> Optional[Dict]:
    """Load the JSON config file, returning None when an optional file is absent"""
    if path is None:
        return None
    try:
        with open(path, "r") as f:
            data = json.load(f)
    except FileNotFoundError:
        if required:
            raise ConfigError(f"Configuration file not found: {path}")
        return None
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in config file: {e}") from e
    except OSError as e:
        raise ConfigError(f"Unable to read config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object")
    return data


def split_numbers(value: Union[str, Iterable[str], None]) -> Tuple[str, ...]:
    """Normalise comma-separated or list-valued phone numbers"""
    if value is None:
        return ()
    if isinstance(value, str):
        value = [value]
    numbers = []
    for item in value:
        numbers.extend(part.strip() for part in str(item).split(","))
    return tuple(number for number in numbers if number)


def _to_int(name: str, value) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid {name}: {value!r}")


def build_config(
    flags: Optional[Mapping] = None,
    environ: Optional[Mapping[str, str]] = None,
    config_path: Optional[str] = None,
    home: Optional[Path] = None,
) -> Config:
    """
    Build the run configuration

    Args:
        flags: Command-line values, None meaning "not given"
        environ: Environment variables (already merged with .env)
        config_path: Explicit config file, which must then exist
        home: Home directory searched for the default config file

    Returns:
        Frozen Config
    """
    flags = dict(flags or {})
    environ = dict(environ or {})

    if config_path:
        file_path, required = config_path, True
    else:
        home = home if home is not None else Path.home()
        file_path, required = str(home / DEFAULT_CONFIG_FILENAME), False
    file_values = load_config_file(file_path, required)
    config_file_used = file_path if file_values is not None else None
    file_values = file_values or {}

    def lookup(key: str, default):
        if flags.get(key) is not None:
            return flags[key]
        env_name = ENV_KEYS.get(key)
        if env_name and environ.get(env_name):
            return environ[env_name]
        if file_values.get(key) is not None:
            return file_values[key]
        return default

    logging_section = file_values.get("logging", {}) or {}
    if not isinstance(logging_section, dict):
        raise ConfigError("The logging section of the config file must be an object")

    return Config(
        cinema_id=_to_int("cinema id", lookup("cinema_id", DEFAULT_CINEMA_ID)),
        notifications_file=str(
            lookup("notifications_file", DEFAULT_NOTIFICATIONS_FILE)
        ),
        sms_numbers=split_numbers(lookup("sms_numbers", ())),
        twilio_from=str(lookup("twilio_from", "")),
        twilio_sid=str(lookup("twilio_sid", "")),
        twilio_token=str(lookup("twilio_token", "")),
        listings_url=str(lookup("listings_url", LISTINGS_XML_URL)),
        disable_sms=bool(flags.get("disable_sms", False)),
        verbose=bool(flags.get("verbose", False)),
        console_level=str(
            logging_section.get("console_level", DEFAULT_CONSOLE_LEVEL)
        ).upper(),
        file_level=str(logging_section.get("file_level", DEFAULT_FILE_LEVEL)).upper(),
        log_file=logging_section.get("log_file"),
        config_file_used=config_file_used,
    )


def setup_logging(config: Config) -> logging.Logger:
    """Setup console and optional file logging for the run"""
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)

    # Remove existing handlers
    logger.handlers = []

    # Console handler
    console_handler = logging.StreamHandler()
    console_level = "DEBUG" if config.verbose else config.console_level
    console_handler.setLevel(_log_level(console_level))
    console_format = logging.Formatter(
        "%(asctime)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
    )
    console_handler.setFormatter(console_format)
    logger.addHandler(console_handler)

    # File handler (optional based on config)
    if config.log_file:
        log_file = Path(
            config.log_file.format(timestamp=datetime.now().strftime("%Y%m%d_%H%M%S"))
        )
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file)
        except OSError as e:
            raise ConfigError(f"Unable to open log file {log_file}: {e}") from e
        file_handler.setLevel(_log_level(config.file_level))
        file_format = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - "
            "%(funcName)s:%(lineno)d - %(message)s"
        )
        file_handler.setFormatter(file_format)
        logger.addHandler(file_handler)
        logger.info(f"Logging to: {log_file}")

    return logger


def _log_level(name: str) -> int:
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        raise ConfigError(f"Unknown log level: {name}")
    return level
