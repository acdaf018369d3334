"""
===========================================================================
config_loader.py — Configuration Loading Module
===========================================================================

PURPOSE:
    This file loads the application's settings from a JSON file called
    "config.json".

    The config file tells the app:
    - Which storage backend to use ("memory" or "sqlite")
    - Where the SQLite database lives (if that backend is chosen)
    - How chatty the logs should be
    - Which browser origins may call the API

HOW IT WORKS:
    1. We look for the config file (GEOCHAT_CONFIG env var, or
       "config.json" in the project folder).
    2. If it exists  → we read it and merge it over the defaults.
    3. If it doesn't → we return the defaults so the app can still start.

USED BY:
    main.py, database.py
===========================================================================
"""

import copy
import json
import os

# ---------------------------------------------------------------------------
# Path to the configuration file
# ---------------------------------------------------------------------------
CONFIG_PATH = os.environ.get("GEOCHAT_CONFIG", "config.json")

DEFAULT_CONFIG = {
    "storage": {
        "backend": "memory",          # "memory" or "sqlite"
        "db_path": "data/geochat.db"  # only used by the sqlite backend
    },
    "log_level": "INFO",
    "cors_origins": ["*"]
}


def _merge(defaults: dict, overrides: dict) -> dict:
    """Recursively lay 'overrides' on top of a copy of 'defaults'."""
    merged = copy.deepcopy(defaults)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path: str = None) -> dict:
    """
    Load and return the application configuration.

    Args:
        path : Optional path to a JSON config file. Defaults to CONFIG_PATH.

    Returns:
        dict: The defaults, with anything found in the file layered on top.

    Example of what config.json looks like:
        {
            "storage": {"backend": "sqlite", "db_path": "data/geochat.db"},
            "log_level": "DEBUG"
        }
    """
    path = path or CONFIG_PATH

    # Step 1: Check if the config file exists
    if os.path.exists(path):
        # Step 2a: File found! Parse it and fill the gaps from the defaults
        with open(path, "r") as f:
            return _merge(DEFAULT_CONFIG, json.load(f))

    # Step 2b: File NOT found — return safe default settings
    return copy.deepcopy(DEFAULT_CONFIG)


# ---------------------------------------------------------------------------
# Load config once when this module is first imported
# ---------------------------------------------------------------------------
# Every other file that imports 'config' gets the SAME configuration object.
config = load_config()
