# config_manager.py
import os
import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

config_json = Path(__file__).resolve().parent.parent / "config.json"
ui_strings = Path(__file__).resolve().parent.parent / "ui_strings.json"

# Used whenever config.json is missing, corrupt or lacks a key
DEFAULT_SETTINGS = {
    "server_url": "http://127.0.0.1:3000",
    "server_port": 3000,
    "request_timeout": 5,
    "transport": "http",
    "darkmode": False,
    "log_level": "INFO",
    "max_plot_points": 2000,
}

ENV_PREFIX = "WEBCALC_"


def _coerce(raw, default):
    """Convert an environment string to the type of the default value."""
    if isinstance(default, bool):
        return raw.strip().lower() in ("1", "true", "yes", "on")
    if isinstance(default, int):
        return int(raw)
    if isinstance(default, float):
        return float(raw)
    return raw


def _env_overrides():
    overrides = {}
    for key, default in DEFAULT_SETTINGS.items():
        raw = os.getenv(ENV_PREFIX + key.upper())
        if raw is None:
            continue
        try:
            overrides[key] = _coerce(raw, default)
        except ValueError:
            logger.warning(f"[Config] Ignoring invalid {ENV_PREFIX}{key.upper()}={raw!r}")
    return overrides


def _read_file(path=None):
    try:
        with open(path or config_json, 'r', encoding= 'utf-8') as f:
            return json.load(f)

    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.debug(f"[Config] Using defaults: {e}")
        return {}


def load_setting_value(key_value, path=None):
    settings_dict = dict(DEFAULT_SETTINGS)
    settings_dict.update(_read_file(path))
    settings_dict.update(_env_overrides())

    if key_value == "all":
        return settings_dict

    else:
        return settings_dict.get(key_value, 0)


def load_setting_description(key_value, path=None):
    try:
        with open(path or ui_strings, 'r', encoding= 'utf-8') as f:
            settings_dict = json.load(f)

    except (FileNotFoundError, json.JSONDecodeError):
        return {}


    if key_value == "all":
        return settings_dict

    else:
        return settings_dict.get(key_value, 0)


def save_setting(settings_dict, path=None):
    """Write settings back to config.json.

    Values that only came from defaults or WEBCALC_* variables are left out,
    so a temporary override never ends up in the file.
    """
    file_settings = _read_file(path)
    overrides = _env_overrides()
    to_save = dict(file_settings)
    for key, value in settings_dict.items():
        if key in overrides and value == overrides[key]:
            continue  # the file keeps whatever it had
        if key in file_settings or value != DEFAULT_SETTINGS.get(key):
            to_save[key] = value

    try:
        with open (path or config_json, 'w', encoding= 'utf-8') as f:
            json.dump(to_save, f, indent=4)
            return settings_dict

    except (OSError, TypeError) as e:
        logger.error(f"[Config] Settings could not be saved: {e}")
        return{}
