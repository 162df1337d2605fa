"""
Configuration loading for the denormalizer CLI.

Example denormalizer.yaml:

    denormalizer:
      threshold: 50
      max_depth: 3

    entities:
      user:
        api: [get_user, get_users]
        plugins:
          denormalizer:
            get_one: get_user
            get_all: get_users
      message:
        api: [get_message]
        plugins:
          denormalizer:
            schema:
              author: user
              visibleTo: [user]
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from ..core.defs import NAME, PluginConfig
from ..core.errors import ConfigError


DEFAULT_CONFIG_PATH = "denormalizer.yaml"


@dataclass
class DenormalizerFileConfig:
    """Plugin config plus entity configs, as read from YAML."""
    plugin: PluginConfig = field(default_factory=PluginConfig)
    entities: dict[str, dict[str, Any]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "DenormalizerFileConfig":
        """Create config from dictionary."""
        data = data or {}
        entities = data.get("entities") or {}
        if not isinstance(entities, dict):
            raise ConfigError(f"'entities' must be a mapping, got {type(entities).__name__}")

        normalized: dict[str, dict[str, Any]] = {}
        for name, entity in entities.items():
            entity = dict(entity or {})
            entity["name"] = name
            entity["api"] = list(entity.get("api") or [])
            normalized[name] = entity

        return cls(
            plugin=PluginConfig.from_dict(data.get(NAME)),
            entities=normalized,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary for YAML serialization."""
        return {
            NAME: self.plugin.to_dict(),
            "entities": {
                name: {k: v for k, v in entity.items() if k != "name"}
                for name, entity in self.entities.items()
            },
        }

    def save(self, path: Path | str = DEFAULT_CONFIG_PATH) -> None:
        """Save configuration to YAML file."""
        path = Path(path)
        content = yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False)
        path.write_text(content)


def load_config(path: Path | str = DEFAULT_CONFIG_PATH) -> DenormalizerFileConfig | None:
    """Load configuration from YAML file."""
    path = Path(path)
    if not path.exists():
        return None

    data = yaml.safe_load(path.read_text())
    return DenormalizerFileConfig.from_dict(data)
