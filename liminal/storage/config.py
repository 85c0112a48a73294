"""Global app configuration (engine pacing and probabilities, transcript template)."""

import json
from pathlib import Path
from typing import Any

from liminal.models import EngineSettings

from .core import data_dir

_CONFIG_DEFAULTS: dict[str, Any] = {
    "engine": EngineSettings().model_dump(),
    "default_archetype": "Undefined",
    "transcript_template": "",
}


def _config_path() -> Path:
    return data_dir() / "config.json"


def get_config() -> dict[str, Any]:
    """Read config, returning defaults merged with stored values."""
    config: dict[str, Any] = {
        "engine": dict(_CONFIG_DEFAULTS["engine"]),
        "default_archetype": _CONFIG_DEFAULTS["default_archetype"],
        "transcript_template": _CONFIG_DEFAULTS["transcript_template"],
    }
    path = _config_path()
    if path.is_file():
        stored = json.loads(path.read_text())
        if isinstance(stored.get("engine"), dict):
            config["engine"].update(stored["engine"])
        if "default_archetype" in stored:
            config["default_archetype"] = stored["default_archetype"]
        if "transcript_template" in stored:
            config["transcript_template"] = stored["transcript_template"]
    return config


def update_config(fields: dict[str, Any]) -> dict[str, Any]:
    """Merge fields into config and persist. Returns full config.

    The engine block is validated before anything is written, so a bad
    value raises pydantic.ValidationError and leaves the stored file alone.
    """
    config = get_config()
    if isinstance(fields.get("engine"), dict):
        merged = {**config["engine"], **fields["engine"]}
        config["engine"] = EngineSettings.model_validate(merged).model_dump()
    if "default_archetype" in fields:
        config["default_archetype"] = fields["default_archetype"]
    if "transcript_template" in fields:
        config["transcript_template"] = fields["transcript_template"]
    _config_path().write_text(json.dumps(config, indent=2))
    return config


def get_engine_settings() -> EngineSettings:
    return EngineSettings.model_validate(get_config()["engine"])
