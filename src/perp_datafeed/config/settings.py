"""
Settings management using Pydantic.

Loads configuration from YAML files and environment variables.
Environment variables override YAML values.
"""

from __future__ import annotations

import logging
import os
from decimal import Decimal
from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

DEFAULT_COINEX_BASE_URL = "https://api.coinex.com"


class ExchangeSettings(BaseModel):
    """Settings for a single exchange REST endpoint."""

    base_url: str = DEFAULT_COINEX_BASE_URL
    request_timeout_seconds: Decimal = Field(
        default=Decimal("30.0"),
        gt=Decimal("0"),
        description="Total timeout for one REST request (connect + read).",
    )
    connect_timeout_seconds: Decimal = Field(default=Decimal("10.0"), gt=Decimal("0"))
    user_agent: str = "perp-datafeed/1.0"

    def validate_endpoint(self, exchange_name: str) -> list[str]:
        """
        Validate the endpoint configuration.

        Returns a list of validation errors. Empty list means validation passed.
        """
        errors = []

        if not self.base_url or self.base_url == "":
            errors.append(f"{exchange_name}: base_url is required")
        elif not self.base_url.startswith(("http://", "https://")):
            errors.append(f"{exchange_name}: base_url must start with http:// or https:// (got {self.base_url!r})")

        if self.connect_timeout_seconds > self.request_timeout_seconds:
            errors.append(
                f"{exchange_name}: connect_timeout_seconds ({self.connect_timeout_seconds}) "
                f"exceeds request_timeout_seconds ({self.request_timeout_seconds})"
            )

        return errors


class DatabaseSettings(BaseModel):
    """Database settings."""

    path: str = "data/coinex_perpetuals.db"
    wal_mode: bool = True
    busy_timeout_ms: int = 5000


class LoggingSettings(BaseModel):
    """Logging settings."""

    level: str = "INFO"
    log_dir: str = "logs"
    file_enabled: bool = True
    json_enabled: bool = False
    json_file: str = "logs/perp_datafeed_json.jsonl"
    # Set to 0 to disable rotation.
    json_max_bytes: int = 10_000_000
    json_backup_count: int = 3


class Settings(BaseSettings):
    """
    Main settings container.

    Loads from YAML file based on environment, then applies env var overrides.
    """

    env: str = Field(default="development", alias="FEED_ENV")

    coinex: ExchangeSettings = Field(default_factory=ExchangeSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = {
        "env_prefix": "FEED_",
        "env_nested_delimiter": "__",
        "extra": "ignore",
        "populate_by_name": True,
    }

    def validate_config(self) -> list[str]:
        """
        Validate that the settings can drive a fetch run.

        Returns:
            List of validation error messages. Empty list means all validations passed.
        """
        errors = []

        errors.extend(self.coinex.validate_endpoint("CoinEx"))

        if not self.database.path or self.database.path == "":
            errors.append("Database path is required")

        if self.database.busy_timeout_ms < 0:
            errors.append("database.busy_timeout_ms must not be negative")

        if not isinstance(getattr(logging, self.logging.level.upper(), None), int):
            errors.append(f"logging.level is not a valid level: {self.logging.level!r}")

        return errors

    @classmethod
    def from_yaml(cls, env: str = "development") -> Settings:
        """
        Load settings from config.yaml, merged with `{env}.yaml` when present.

        The 'env' parameter is also stored as `settings.env` (for banners/logging).
        """
        config_dir = Path(__file__).parent
        default_file = config_dir / "config.yaml"
        env_file = config_dir / f"{env}.yaml"

        data: dict = {}
        if default_file.exists():
            with open(default_file, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}

        if env_file.exists():
            with open(env_file, encoding="utf-8") as f:
                env_data = yaml.safe_load(f) or {}
            data = _deep_merge(data, env_data)

        if "coinex" not in data:
            data["coinex"] = {}
        if os.getenv("COINEX_BASE_URL"):
            data["coinex"]["base_url"] = os.getenv("COINEX_BASE_URL")

        if "database" not in data:
            data["database"] = {}
        if os.getenv("FEED_DATABASE_PATH"):
            data["database"]["path"] = os.getenv("FEED_DATABASE_PATH")

        if "logging" not in data:
            data["logging"] = {}
        if os.getenv("FEED_LOG_LEVEL"):
            data["logging"]["level"] = os.getenv("FEED_LOG_LEVEL")

        data["env"] = env

        _warn_unknown_keys(data, cls)

        return cls(**data)


def _deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dicts, override wins on conflicts."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _collect_all_keys(data: dict, prefix: str = "") -> set[str]:
    """Recursively collect all keys from a nested dict in dot-notation."""
    keys = set()
    for key, value in data.items():
        full_key = f"{prefix}.{key}" if prefix else key
        keys.add(full_key)
        if isinstance(value, dict):
            keys.update(_collect_all_keys(value, full_key))
    return keys


def _collect_model_fields(model_class: type[BaseModel], prefix: str = "") -> set[str]:
    """Recursively collect all field names from a Pydantic model in dot-notation."""
    fields = set()
    for field_name, field_info in model_class.model_fields.items():
        full_key = f"{prefix}.{field_name}" if prefix else field_name
        fields.add(full_key)

        annotation = field_info.annotation
        if isinstance(annotation, type) and issubclass(annotation, BaseModel):
            fields.update(_collect_model_fields(annotation, full_key))

    return fields


def _warn_unknown_keys(data: dict, model_class: type[BaseModel]) -> None:
    """Warn about YAML keys that don't match any model field (likely typos)."""
    yaml_keys = _collect_all_keys(data)
    model_fields = _collect_model_fields(model_class)

    unknown_keys = yaml_keys - model_fields

    if unknown_keys:
        logger.warning(
            f"Unknown configuration keys found (will be ignored due to extra='ignore'): {sorted(unknown_keys)}. "
            f"This may indicate typos in config.yaml or outdated config keys."
        )


@lru_cache(maxsize=4)
def get_settings(env: str | None = None) -> Settings:
    """Get cached settings instance."""
    resolved_env = env or os.getenv("FEED_ENV", "development")
    return Settings.from_yaml(env=resolved_env)
