"""
Host settings: a small JSON file holding the server host and port.

A missing or unreadable file is replaced with the defaults; callers never
see a ConfigError.
"""

import json
import logging
from pathlib import Path

from pydantic import BaseModel, ValidationError

from parley.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 3811
SETTINGS_FILE = Path.home() / ".parley" / "settings.json"


class HostSettings(BaseModel):
    host: str
    port: int

    model_config = {"frozen": True}

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"


DEFAULT_SETTINGS = HostSettings(host=DEFAULT_HOST, port=DEFAULT_PORT)


def read_settings(path: Path = SETTINGS_FILE) -> HostSettings:
    try:
        return HostSettings.model_validate_json(path.read_text())
    except FileNotFoundError:
        raise ConfigError(f"No settings file at {path}", details={"path": str(path)})
    except (OSError, UnicodeDecodeError, ValidationError) as e:
        raise ConfigError(f"Unreadable settings file {path}: {e}", details={"path": str(path)})


def save_settings(settings: HostSettings, path: Path = SETTINGS_FILE) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(settings.model_dump(), indent=2))


def load_config(path: Path = SETTINGS_FILE) -> HostSettings:
    """Read host settings, regenerating the file with defaults when it is missing or corrupt."""
    try:
        return read_settings(path)
    except ConfigError as e:
        logger.info("%s; writing defaults", e)
    try:
        save_settings(DEFAULT_SETTINGS, path)
    except OSError as e:
        logger.warning("Could not write default settings to %s: %s", path, e)
    return DEFAULT_SETTINGS
