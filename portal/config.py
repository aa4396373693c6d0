"""Configuration utilities for the modification questionnaire portal.

This module loads application configuration with the following rules:
- Primary source: `portal_config.json` at the project root.
- Overrides: environment variables, then optional text files under `config/`.
- Validation: Pydantic models enforce required fields and value constraints.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator


CONFIG_DIR = Path("config")
ROOT_PORTAL_CONFIG = Path("portal_config.json")
logger = logging.getLogger(__name__)


def _read_config_file(rel_path: str) -> Optional[str]:
    path = CONFIG_DIR / rel_path
    try:
        if path.exists():
            return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read override %s: %s", path, e)
        return None
    return None


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(key, default)


class NavigationConfig(BaseModel):
    """Route names the web layer redirects to."""

    route_prefix: str = "pmc:"
    area_of_change_route: str = "pmc:areaofchange"
    review_route: str = "pmc:reviewchanges"
    back_text: str = "Back"

    @field_validator("area_of_change_route", "review_route")
    @classmethod
    def route_must_be_non_empty(cls, v: str) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("navigation routes must be non-empty strings")
        return v.strip()

    def section_route(self, static_view_name: str) -> str:
        return f"{self.route_prefix}{static_view_name}"


class JourneysConfig(BaseModel):
    path: Optional[str] = None


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO")

    @field_validator("level")
    @classmethod
    def level_must_be_known(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        level = str(v).strip().upper()
        if level not in allowed:
            raise ValueError(f"logging.level must be one of {sorted(allowed)}")
        return level


class AppConfig(BaseModel):
    navigation: NavigationConfig = Field(default_factory=NavigationConfig)
    journeys: JourneysConfig = Field(default_factory=JourneysConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def _read_json_file(path: Path) -> dict:
    try:
        if path.exists():
            return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error("Failed to read JSON config %s: %s", path, e)
    return {}


def load_config() -> AppConfig:
    """Load configuration with validation.

    Precedence (highest first):
    1) Environment variables
    2) Text files in `config/` (optional)
    3) portal_config.json at project root (primary base)
    4) Defaults
    """

    base = _read_json_file(ROOT_PORTAL_CONFIG)

    def _base(path: str, default: Optional[str] = None) -> Optional[str]:
        cur: object = base
        for key in path.split("."):
            if not isinstance(cur, dict) or key not in cur:
                return default
            cur = cur[key]
        return str(cur) if cur is not None else default

    defaults = NavigationConfig()

    # Navigation routes
    route_prefix = _env("PORTAL_ROUTE_PREFIX") or _read_config_file("navigation.route_prefix") or _base("navigation.route_prefix", defaults.route_prefix)
    area_route = _env("PORTAL_AREA_OF_CHANGE_ROUTE") or _read_config_file("navigation.area_of_change_route") or _base("navigation.area_of_change_route", defaults.area_of_change_route)
    review_route = _env("PORTAL_REVIEW_ROUTE") or _read_config_file("navigation.review_route") or _base("navigation.review_route", defaults.review_route)
    back_text = _env("PORTAL_BACK_TEXT") or _read_config_file("navigation.back_text") or _base("navigation.back_text", defaults.back_text)

    # Journey definitions
    journeys_path = _env("PORTAL_JOURNEYS_PATH") or _read_config_file("journeys.path") or _base("journeys.path")

    # Logging
    log_level = _env("PORTAL_LOG_LEVEL") or _read_config_file("logging.level") or _base("logging.level", "INFO")

    try:
        return AppConfig(
            navigation=NavigationConfig(
                route_prefix=route_prefix,
                area_of_change_route=area_route,
                review_route=review_route,
                back_text=back_text,
            ),
            journeys=JourneysConfig(path=journeys_path),
            logging=LoggingConfig(level=log_level),
        )
    except PydanticValidationError as e:
        logger.error("Invalid application configuration: %s", e)
        raise


__all__ = [
    "AppConfig",
    "NavigationConfig",
    "JourneysConfig",
    "LoggingConfig",
    "load_config",
]
