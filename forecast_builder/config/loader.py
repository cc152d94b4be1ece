"""YAML config loader with identity resolution and dotted-key lookup."""

import os
from pathlib import Path
from typing import Any

import yaml

from forecast_builder.config.defaults import DEFAULT_LOCATIONS
from forecast_builder.config.schema import BuilderConfig
from forecast_builder.models.errors import ConfigurationError

USER_AGENT_ENV = "USER_AGENT"


def load_config(path: str | Path | None = None) -> BuilderConfig:
    """Load and validate config from a YAML file.

    A missing file is treated as empty. If no locations are specified,
    injects DEFAULT_LOCATIONS. An empty ``service.user_agent`` is filled
    from the USER_AGENT environment variable.
    """
    raw: dict[str, Any] = {}
    if path is not None and Path(path).exists():
        with open(path) as f:
            raw = yaml.safe_load(f) or {}

    if "locations" not in raw or not raw["locations"]:
        raw["locations"] = [loc.model_dump() for loc in DEFAULT_LOCATIONS]

    service = raw.setdefault("service", {}) or {}
    raw["service"] = service
    if not service.get("user_agent"):
        service["user_agent"] = os.environ.get(USER_AGENT_ENV, "")

    return BuilderConfig(**raw)


def require_identity(config: BuilderConfig) -> str:
    """Return the contact identity or raise ConfigurationError if unset."""
    user_agent = config.service.user_agent.strip()
    if not user_agent:
        raise ConfigurationError(
            f"{USER_AGENT_ENV} (contact email address) is not configured; "
            "set service.user_agent in the config file or the environment"
        )
    return user_agent


def get_config_value(config: BuilderConfig, dotted_key: str) -> Any:
    """Get a config value by dotted key path. E.g. 'layout.alert_width'."""
    parts = dotted_key.split(".")
    obj: Any = config
    for part in parts:
        if isinstance(obj, list):
            obj = obj[int(part)]
        elif isinstance(obj, dict):
            obj = obj[part]
        elif hasattr(obj, part):
            obj = getattr(obj, part)
        else:
            raise KeyError(f"Config key not found: {dotted_key}")
    return obj
