"""Configuration management."""

import copy
import json
import yaml
from pathlib import Path
from typing import Dict, Any, Optional

DEFAULT_CONFIG_PATH = "remindr.yaml"
NOTIFIER_BACKENDS = ('auto', 'graphical', 'terminal')


def load_config(config_path: str) -> Dict[str, Any]:
    """Load configuration from YAML or JSON file."""
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path, 'r', encoding='utf-8') as f:
        if path.suffix.lower() in ['.yaml', '.yml']:
            data = yaml.safe_load(f)
        elif path.suffix.lower() == '.json':
            data = json.load(f)
        else:
            raise ValueError(f"Unsupported config file format: {path.suffix}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {config_path}")
    return data


def get_default_config() -> Dict[str, Any]:
    """Get default configuration."""
    return {
        'schedule': {
            'tasks_file': 'reminders.txt',
        },
        'confirmation': {
            'window_seconds': 900,
            'max_confirm_attempts': 3,
            'max_reason_prompts': 3,
        },
        'notifier': {
            'backend': 'auto',  # auto, graphical or terminal
            'popup_timeout_seconds': 10,
            'sound': True,
        },
        'engine': {
            'max_sleep_seconds': 30,
        },
        'report': {
            'directory': '.',
            'write_json': False,
        },
        'logging': {
            'level': 'INFO',
        },
    }


def merge_config(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``.

    An empty (null) section keeps the defaults for that section.
    """
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if value is None and isinstance(merged.get(key), dict):
            continue
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def validate_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """Reject configuration the rest of the program cannot use."""
    for section in get_default_config():
        if not isinstance(config.get(section), dict):
            raise ValueError(f"Config section '{section}' must be a mapping")

    backend = str(config['notifier'].get('backend', 'auto')).lower()
    if backend not in NOTIFIER_BACKENDS:
        raise ValueError(
            f"Unknown notifier backend '{backend}' (expected one of: {', '.join(NOTIFIER_BACKENDS)})"
        )
    return config


def resolve_config(config_path: Optional[str]) -> Dict[str, Any]:
    """Defaults overlaid with the config file, if there is one.

    The default path is optional; an explicitly named file must exist.
    """
    defaults = get_default_config()
    if not config_path:
        return defaults
    if config_path == DEFAULT_CONFIG_PATH and not Path(config_path).exists():
        return defaults
    return validate_config(merge_config(defaults, load_config(config_path)))
