import copy
import json
import os

from KeywordSearch.relevance.relevance_set import COMBINE_RULES

CONFIG_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "config.json")

DEFAULT_CONFIG = {
    "scoring": {
        "combine": "sum"
    },
    "lookup": {
        "lowercase": False
    },
    "results": {
        "top": 10,
        "order": "descending"
    },
    "cache": {
        "enabled": True,
        "max_size": 128
    }
}

# Expected type of every setting, used to validate user config files
CONFIG_TYPES = {
    ("scoring", "combine"): str,
    ("lookup", "lowercase"): bool,
    ("results", "top"): int,
    ("results", "order"): str,
    ("cache", "enabled"): bool,
    ("cache", "max_size"): int,
}


def _merge(base, overrides):
    """Recursively merge overrides into a copy of base"""
    merged = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path=None):
    """
    Load configuration from a JSON file, falling back to default settings.

    Args:
        config_path: Path to the config file (defaults to config.json in the package)

    Returns:
        Configuration dictionary with defaults filled in

    Raises:
        ValueError: If a setting in the file has the wrong type
    """
    config_path = config_path or CONFIG_PATH

    if not os.path.exists(config_path):
        print(f"No config found at {config_path}, using default settings")
        return copy.deepcopy(DEFAULT_CONFIG)

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            user_config = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        print(f"Warning: Could not load config file: {e}. Using default settings.")
        return copy.deepcopy(DEFAULT_CONFIG)

    if not isinstance(user_config, dict):
        print("Warning: Config file must contain a JSON object. Using default settings.")
        return copy.deepcopy(DEFAULT_CONFIG)

    config = _merge(DEFAULT_CONFIG, user_config)
    validate_config(config)
    return config


def validate_config(config):
    """
    Check that every known setting has the expected type.

    Raises:
        ValueError: If a section is not an object or a setting has the wrong type
    """
    for section in DEFAULT_CONFIG:
        if not isinstance(config.get(section), dict):
            raise ValueError(f"Config section '{section}' must be an object")

    for (section, key), expected in CONFIG_TYPES.items():
        value = config[section].get(key)
        # bool is a subclass of int, so it is never a valid count
        if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
            raise ValueError(
                f"Config setting '{section}.{key}' must be of type {expected.__name__}, got {value!r}"
            )

    if config["results"]["top"] < 0 or config["cache"]["max_size"] < 0:
        raise ValueError("Config settings 'results.top' and 'cache.max_size' must not be negative")
    if config["results"]["order"] not in ("ascending", "descending"):
        raise ValueError(
            f"Config setting 'results.order' must be 'ascending' or 'descending', "
            f"got {config['results']['order']!r}"
        )


def get_combine_rule(name):
    """
    Resolve a combine rule by name.

    Raises:
        ValueError: If the rule is unknown
    """
    try:
        return COMBINE_RULES[name]
    except KeyError:
        raise ValueError(
            f"Unknown combine rule '{name}', expected one of: {', '.join(sorted(COMBINE_RULES))}"
        ) from None
