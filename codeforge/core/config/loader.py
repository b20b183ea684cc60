"""
Settings loader — codeforge.yml plus environment overrides.

Sources, later wins:
    defaults  <  codeforge.yml (explicit path, or found walking up)  <  environment

Environment:
    GEMINI_API_KEY       API key (required to talk to the model)
    GEMINI_MODEL         model name
    GEMINI_API_ENDPOINT  full generateContent URL (overrides the model)
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

import yaml
from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

CONFIG_FILE = "codeforge.yml"

GEMINI_API_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"
DEFAULT_GEMINI_MODEL = "gemini-2.0-flash-thinking-exp-01-21"

API_KEY_ENV_VAR = "GEMINI_API_KEY"
MODEL_ENV_VAR = "GEMINI_MODEL"
ENDPOINT_ENV_VAR = "GEMINI_API_ENDPOINT"

_ENV_FIELDS = {
    API_KEY_ENV_VAR: "api_key",
    MODEL_ENV_VAR: "model",
    ENDPOINT_ENV_VAR: "api_endpoint",
}


class ConfigError(Exception):
    """Raised when configuration is invalid or incomplete."""


class Settings(BaseModel):
    """Runtime settings for the Gemini client and file output."""

    api_key: str = ""
    model: str = DEFAULT_GEMINI_MODEL
    api_endpoint: str | None = None
    output_dir: str = "."
    request_timeout: float = 120.0

    @property
    def endpoint(self) -> str:
        """The generateContent URL, built from the model unless overridden."""
        if self.api_endpoint:
            return self.api_endpoint
        return f"{GEMINI_API_BASE_URL}/{self.model}:generateContent"

    def require_api_key(self) -> str:
        """Return the API key, or raise with setup instructions."""
        if not self.api_key:
            raise ConfigError(
                f"{API_KEY_ENV_VAR} environment variable not set. "
                f"Please set it with: export {API_KEY_ENV_VAR}=your_api_key_here"
            )
        return self.api_key


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for codeforge.yml starting from the given directory, walking up.

    Returns:
        Path to codeforge.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def _read_config_file(path: Path) -> dict:
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading settings from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # The YAML may wrap everything under a "codeforge" key or be flat
    section = data.get("codeforge", data)
    if not isinstance(section, dict):
        raise ConfigError(f"Expected a mapping under 'codeforge' in {path}")
    return dict(section)


def load_settings(
    path: Path | None = None,
    env: Mapping[str, str] | None = None,
    search: bool = True,
) -> Settings:
    """Load settings from file and environment.

    Args:
        path: Explicit path to codeforge.yml.
        env: Environment mapping (default: ``os.environ``).
        search: Look for codeforge.yml upward from cwd when no path is given.

    Raises:
        ConfigError: The file is missing, unreadable or invalid.
    """
    if env is None:
        env = os.environ

    if path is None and search:
        path = find_config_file()

    data: dict = _read_config_file(path) if path is not None else {}

    for var, field_name in _ENV_FIELDS.items():
        value = env.get(var)
        if value:
            data[field_name] = value

    try:
        settings = Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    logger.debug("Using model %s at %s", settings.model, settings.endpoint)
    return settings
