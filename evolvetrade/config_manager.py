"""Configuration management utilities for the EvolveTrade launcher."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Dict, Optional


SETTINGS_PATH_ENV = "EVOLVETRADE_SETTINGS_PATH"
DEFAULT_USER_PATH = Path("config/settings.local.json")

DEFAULT_SETTINGS: Dict[str, Any] = {
    "logging": {
        "level": "INFO",
        "format": "%(levelname)s: %(message)s",
    },
    "engine": {
        "entry_point": "evolvetrade.engine:run",
    },
}


SETTINGS_SECTIONS = frozenset(DEFAULT_SETTINGS)


class ConfigError(Exception):
    """Raised when launcher settings are missing or invalid."""


def split_entry_point(path: str) -> tuple[str, str]:
    """Split ``module:attribute`` into its stripped parts; missing parts come back empty."""
    module_name, _, attribute = path.partition(":")
    return module_name.strip(), attribute.strip()


@dataclass
class LoggingSettings:
    level: str = "INFO"
    format: str = "%(levelname)s: %(message)s"

    def level_number(self) -> int:
        return logging.getLevelName(self.level.upper())


@dataclass
class EngineSettings:
    entry_point: str = "evolvetrade.engine:run"

    def split_entry_point(self) -> tuple[str, str]:
        return split_entry_point(self.entry_point)


@dataclass
class LauncherSettings:
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    engine: EngineSettings = field(default_factory=EngineSettings)

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ConfigManager:
    """Loads and validates launcher settings from defaults, a JSON file and the environment."""

    def __init__(
        self,
        user_path: Path | str | None = None,
        env_prefix: str = "EVOLVETRADE_",
    ) -> None:
        if user_path is None:
            user_path = os.environ.get(SETTINGS_PATH_ENV) or DEFAULT_USER_PATH
        self.user_path = Path(user_path)
        self.env_prefix = env_prefix
        self._cached_settings: Optional[LauncherSettings] = None

    def load(self, force_reload: bool = False) -> LauncherSettings:
        """Load settings from defaults, user overrides, and environment."""
        if self._cached_settings is not None and not force_reload:
            return self._cached_settings

        merged = self._merge_user_overrides(DEFAULT_SETTINGS)
        merged = self._apply_env_overrides(merged)

        settings = self._build_settings(merged)
        self._validate_settings(settings)

        self._cached_settings = settings
        return settings

    def clear_cache(self) -> None:
        """Clear the cached settings instance."""
        self._cached_settings = None

    # ------------------------------------------------------------------
    # Loading helpers
    # ------------------------------------------------------------------
    def _merge_user_overrides(self, base: Dict[str, Any]) -> Dict[str, Any]:
        data = json.loads(json.dumps(base))  # deep copy via JSON to keep types JSON-compatible
        if self.user_path.exists():
            try:
                with self.user_path.open("r", encoding="utf-8") as handle:
                    overrides = json.load(handle)
            except (json.JSONDecodeError, UnicodeDecodeError) as exc:
                raise ConfigError(f"Unable to parse settings file {self.user_path}: {exc}") from exc
            except OSError as exc:
                raise ConfigError(f"Unable to read settings file {self.user_path}: {exc}") from exc
            if not isinstance(overrides, dict):
                raise ConfigError(f"Settings file {self.user_path} must contain a JSON object")
            self._deep_merge(data, overrides)
        return data

    def _apply_env_overrides(self, data: Dict[str, Any]) -> Dict[str, Any]:
        result = json.loads(json.dumps(data))
        prefix_len = len(self.env_prefix)
        for key, value in os.environ.items():
            if not key.startswith(self.env_prefix) or key == SETTINGS_PATH_ENV:
                continue
            path_parts = key[prefix_len:].lower().split("__")
            parsed_value = self._parse_env_value(value)
            self._set_nested_value(result, path_parts, parsed_value)
        return result

    # ------------------------------------------------------------------
    # Build dataclasses
    # ------------------------------------------------------------------
    def _build_settings(self, data: Dict[str, Any]) -> LauncherSettings:
        unknown = sorted(set(data) - SETTINGS_SECTIONS)
        if unknown:
            raise ConfigError(f"Unknown settings section(s): {', '.join(unknown)}")

        try:
            logging_settings = LoggingSettings(**data["logging"])
            engine = EngineSettings(**data["engine"])
        except KeyError as exc:
            raise ConfigError(f"Missing required settings section: {exc}") from exc
        except TypeError as exc:
            raise ConfigError(f"Invalid settings field: {exc}") from exc

        return LauncherSettings(logging=logging_settings, engine=engine)

    # ------------------------------------------------------------------
    # Validation & utilities
    # ------------------------------------------------------------------
    def _validate_settings(self, settings: LauncherSettings) -> None:
        if not isinstance(settings.logging.level, str):
            raise ConfigError("logging.level must be a string")
        if not isinstance(settings.logging.level_number(), int):
            raise ConfigError(f"logging.level '{settings.logging.level}' is not a known logging level")
        if not isinstance(settings.logging.format, str) or not settings.logging.format:
            raise ConfigError("logging.format must be a non-empty string")
        try:
            logging.Formatter(settings.logging.format, validate=True)
        except ValueError as exc:
            raise ConfigError(f"logging.format is invalid: {exc}") from exc

        if not isinstance(settings.engine.entry_point, str):
            raise ConfigError("engine.entry_point must be a string")
        module_name, attribute = settings.engine.split_entry_point()
        if not module_name or not attribute:
            raise ConfigError(
                f"engine.entry_point must look like 'module:function', got '{settings.engine.entry_point}'"
            )

    @staticmethod
    def _deep_merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> None:
        for key, value in overrides.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                ConfigManager._deep_merge(base[key], value)
            else:
                base[key] = value

    @staticmethod
    def _parse_env_value(value: str) -> Any:
        value = value.strip()
        if not value:
            return value
        lowered = value.lower()
        if lowered in {"true", "false"}:
            return lowered == "true"
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value

    @staticmethod
    def _set_nested_value(target: Dict[str, Any], path_parts: list[str], value: Any) -> None:
        current = target
        for part in path_parts[:-1]:
            if part not in current or not isinstance(current[part], dict):
                current[part] = {}
            current = current[part]
        current[path_parts[-1]] = value

    def to_dict(self) -> Dict[str, Any]:
        """Return the currently cached settings as a dictionary."""
        settings = self.load()
        return settings.as_dict()


__all__ = [
    "ConfigError",
    "ConfigManager",
    "DEFAULT_SETTINGS",
    "EngineSettings",
    "LauncherSettings",
    "LoggingSettings",
    "SETTINGS_PATH_ENV",
    "SETTINGS_SECTIONS",
    "split_entry_point",
]
