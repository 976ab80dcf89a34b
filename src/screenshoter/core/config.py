"""
Configuration Module for Screenshoter.

Description:
This module centralizes runtime settings: where screenshots, archives and
preferences are stored, which monitor is captured and how often, and how
logging is set up. Values come from environment variables, optionally loaded
from a .env file.

Third-Party Package Documentation:
- python-dotenv: https://github.com/theskumar/python-dotenv

Sample Input:
Environment variables (e.g., in .env file or exported):
SCREENSHOTER_STORAGE_ROOT="~/Screenshoter"
SCREENSHOTER_PREFS_DIR="~/.config/screenshoter"
SCREENSHOTER_MONITOR=1
SCREENSHOTER_FRAME_INTERVAL=0.25
SCREENSHOTER_AUTO_INTERVAL=5
SCREENSHOTER_LOG_LEVEL="INFO"
SCREENSHOTER_LOG_FILE="~/.config/screenshoter/screenshoter.log"

Expected Output:
load_config() returns a nested dict, e.g.
{"storage": {"root": "/home/ada/Screenshoter", ...}, "capture": {"monitor": 1, ...}, ...}
"""

import os
from typing import Any, Dict, List, Mapping, Optional

from dotenv import load_dotenv
from loguru import logger

from screenshoter.core.constants import CAPTURE_SETTINGS
from screenshoter.core.utils import truncate_large_value

VALID_LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


def _get_number(environ: Mapping[str, str], name: str, default: Any, cast) -> Any:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={truncate_large_value(raw)!r}, using {default}")
        return default


def load_config(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """
    Build the configuration dictionary.

    Args:
        environ: Variables to read. When omitted, a .env file is loaded into
            the process environment and os.environ is used.

    Returns:
        Dict[str, Any]: Nested configuration
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    log_file = environ.get("SCREENSHOTER_LOG_FILE") or None

    return {
        "storage": {
            "root": os.path.expanduser(environ.get("SCREENSHOTER_STORAGE_ROOT", "~/Screenshoter")),
            "prefs_dir": os.path.expanduser(environ.get("SCREENSHOTER_PREFS_DIR", "~/.config/screenshoter")),
        },
        "capture": {
            "monitor": _get_number(environ, "SCREENSHOTER_MONITOR", CAPTURE_SETTINGS["DEFAULT_MONITOR"], int),
            "frame_interval": _get_number(
                environ, "SCREENSHOTER_FRAME_INTERVAL", CAPTURE_SETTINGS["FRAME_INTERVAL"], float
            ),
            "auto_interval": _get_number(
                environ, "SCREENSHOTER_AUTO_INTERVAL", CAPTURE_SETTINGS["AUTO_CAPTURE_INTERVAL"], float
            ),
        },
        "logging": {
            "level": environ.get("SCREENSHOTER_LOG_LEVEL", "WARNING").upper(),
            "file": os.path.expanduser(log_file) if log_file else None,
        },
    }


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Check a configuration dictionary.

    Args:
        config: Dictionary returned by load_config

    Returns:
        List[str]: Problems found, empty when the configuration is usable
    """
    problems = []
    if not config["storage"]["root"]:
        problems.append("Storage root must not be empty")
    if not config["storage"]["prefs_dir"]:
        problems.append("Preferences directory must not be empty")
    if config["capture"]["monitor"] < 0:
        problems.append(f"Monitor number must be 0 or greater, got {config['capture']['monitor']}")
    if config["capture"]["frame_interval"] <= 0:
        problems.append(f"Frame interval must be positive, got {config['capture']['frame_interval']}")
    if config["capture"]["auto_interval"] <= 0:
        problems.append(f"Auto capture interval must be positive, got {config['capture']['auto_interval']}")
    if config["logging"]["level"] not in VALID_LOG_LEVELS:
        problems.append(f"Unknown log level {config['logging']['level']}")
    return problems


CONFIG: Dict[str, Any] = load_config()
