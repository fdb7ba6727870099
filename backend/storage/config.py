"""Global app settings (autosave delay, character limits, story defaults)."""

import json
from typing import Any

from .core import config_path

_CONFIG_DEFAULTS: dict[str, Any] = {
    "autosave_delay_ms": 500,
    "enforce_character_limits": False,
    "story": {
        "default_name": "User",
        "default_needs": "customization",
    },
}


def get_config() -> dict[str, Any]:
    """Read config, returning defaults merged with stored values."""
    config: dict[str, Any] = {
        "autosave_delay_ms": _CONFIG_DEFAULTS["autosave_delay_ms"],
        "enforce_character_limits": _CONFIG_DEFAULTS["enforce_character_limits"],
        "story": dict(_CONFIG_DEFAULTS["story"]),
    }
    path = config_path()
    if path.is_file():
        stored = json.loads(path.read_text())
        if "autosave_delay_ms" in stored:
            config["autosave_delay_ms"] = stored["autosave_delay_ms"]
        if "enforce_character_limits" in stored:
            config["enforce_character_limits"] = bool(stored["enforce_character_limits"])
        if isinstance(stored.get("story"), dict):
            config["story"].update(stored["story"])
    return config


def update_config(fields: dict[str, Any]) -> dict[str, Any]:
    """Merge fields into config and persist. Returns full config."""
    config = get_config()
    if "autosave_delay_ms" in fields:
        config["autosave_delay_ms"] = max(0, int(fields["autosave_delay_ms"]))
    if "enforce_character_limits" in fields:
        config["enforce_character_limits"] = bool(fields["enforce_character_limits"])
    if isinstance(fields.get("story"), dict):
        for key, value in fields["story"].items():
            if key in config["story"]:
                config["story"][key] = value
    config_path().write_text(json.dumps(config, indent=2))
    return config
