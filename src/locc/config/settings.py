# src/locc/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/locc/config/defaults.yaml`, then optionally overridden by:
- an external YAML file via `LOCC_CONFIG_PATH`
- a small whitelist of environment variables (e.g., `LOCC_NOMINATIM_URL`)

Design rule:
- Endpoints and timeouts live in YAML, not hard-coded in the geocoding client.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from locc import __version__
from locc.core.env import load_dotenv_if_present


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `locc.config`."""
    text = resources.files("locc.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "locc"
    log_level: str = "WARNING"
    http_timeout_seconds: float = Field(15, gt=0)

    @property
    def user_agent(self) -> str:
        return f"{self.name} v{__version__}"


class NominatimSettings(BaseModel):
    base_url: str = "https://nominatim.openstreetmap.org"
    search_format: str = "jsonv2"
    reverse_format: str = "json"
    search_limit: int = Field(1, ge=1)


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    nominatim: NominatimSettings = Field(default_factory=NominatimSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload."""
    data = dict(data)

    log_level = os.getenv("LOCC_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    timeout = os.getenv("LOCC_HTTP_TIMEOUT_SECONDS")
    if timeout:
        data.setdefault("app", {})["http_timeout_seconds"] = timeout

    base_url = os.getenv("LOCC_NOMINATIM_URL")
    if base_url:
        data.setdefault("nominatim", {})["base_url"] = base_url.rstrip("/")

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("LOCC_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")
