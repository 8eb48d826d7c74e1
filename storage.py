# storage.py
"""
Filesystem layout, options and persistence helpers.

All data for the application lives under DATA_ROOT (default ~/.azconf,
override with AZCONF_DATA_ROOT).
"""

import os
from pathlib import Path
import json
from typing import Any, Dict, List

import logging
logger = logging.getLogger(__name__)

# -------------------------------------------------------------------
# Root & directory layout (configurable)
# -------------------------------------------------------------------

DATA_ROOT: Path = Path(os.getenv("AZCONF_DATA_ROOT", str(Path.home() / ".azconf")))

DEFAULT_SETTINGS_NAME = 'default.json'
OPTIONS_NAME = 'options.json'

DEFAULT_OPTIONS: Dict[str, Any] = {
    'gateway': 'az',
    'az_command': 'az',
    'az_timeout': 60,
    'host': '0.0.0.0',
    'port': 8080,
    'storage_secret': 'azconf-secret',
}

# option name -> (environment variable, converter)
ENV_OVERRIDES = {
    'gateway': ('AZCONF_GATEWAY', str),
    'az_command': ('AZCONF_AZ_COMMAND', str),
    'az_timeout': ('AZCONF_AZ_TIMEOUT', int),
    'host': ('AZCONF_HOST', str),
    'port': ('AZCONF_PORT', int),
}


# -------------------------------------------------------------------
# Initialization
# -------------------------------------------------------------------
def ensure_dirs() -> None:
    """
    Ensure required directories exist.
    """
    for path in (DATA_ROOT, tmp_dir()):
        path.mkdir(parents=True, exist_ok=True)


def tmp_dir() -> Path:
    return DATA_ROOT / 'tmp'


def default_settings_file() -> Path:
    return DATA_ROOT / DEFAULT_SETTINGS_NAME


def options_file() -> Path:
    return DATA_ROOT / OPTIONS_NAME


# -------------------------------------------------------------------
# JSON helpers
# -------------------------------------------------------------------
def load_json(path: Path, default: Any):
    if not path.exists():
        logger.debug(f"No JSON file found at {path}")
        return default
    try:
        return json.loads(path.read_text())
    except json.JSONDecodeError:
        logger.warning(f"Load JSON file failed: {path}")
        return default


# -------------------------------------------------------------------
# Options
# -------------------------------------------------------------------
def get_options() -> Dict[str, Any]:
    """
    Defaults, overridden by options.json, overridden by environment.
    """
    options = dict(DEFAULT_OPTIONS)

    stored = load_json(options_file(), {})
    if isinstance(stored, dict):
        options.update({k: v for k, v in stored.items() if k in DEFAULT_OPTIONS})
    else:
        logger.warning("options.json is not a JSON object, ignored")

    for key, (env_name, convert) in ENV_OVERRIDES.items():
        raw = os.getenv(env_name)
        if raw is None or raw == '':
            continue
        try:
            options[key] = convert(raw)
        except ValueError:
            logger.warning(f"Invalid value for {env_name}: {raw!r}, keeping {options[key]!r}")

    return options


# -------------------------------------------------------------------
# Default settings (expected variables)
# -------------------------------------------------------------------
def import_default_settings(content: bytes) -> Path:
    """
    Store a user-chosen settings file as the default settings.

    The content must be JSON; it is copied verbatim.
    """
    try:
        json.loads(content)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ValueError(f"Default settings file is not valid JSON: {e}") from e

    ensure_dirs()
    target = default_settings_file()
    target.write_bytes(content)
    logger.info(f"Default settings imported to {target}")
    return target


def read_expected_names() -> List[str]:
    """
    Names listed in the default settings file, in file order.

    Expected format: [{"name": "KEY", "value": "..."}, ...]
    """
    entries = load_json(default_settings_file(), [])
    if not isinstance(entries, list):
        logger.warning("Default settings file is not a JSON list, no expected variables")
        return []

    names: List[str] = []
    for entry in entries:
        if isinstance(entry, dict) and isinstance(entry.get('name'), str):
            names.append(entry['name'])
        else:
            logger.warning(f"Skipping malformed default settings entry: {entry!r}")
    return names
