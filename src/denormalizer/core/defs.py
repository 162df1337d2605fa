"""
Core dataclass definitions for the denormalizer.

These define accessors (where a foreign key lives and what it references)
and the plugin configuration, both global and per entity.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional, Union

from .errors import ConfigError
from .utils import convert_keys_to_snake


NAME = "denormalizer"

DEFAULT_THRESHOLD = math.inf
DEFAULT_MAX_DEPTH = 12
DEFAULT_ID_FIELD = "id"

# "user" for a to-one reference, ["user"] for a to-many reference
TypeRef = Union[str, list]


@dataclass(frozen=True)
class Accessor:
    """
    Location of a foreign key inside an entity and the type it references.

    Example:
        Accessor(path=("nestedData", "comments"), target="comment", many=True)
    """
    path: tuple[str, ...]
    target: str
    many: bool = False

    @property
    def type_ref(self) -> TypeRef:
        return [self.target] if self.many else self.target

    @classmethod
    def from_pair(cls, path: list[str] | tuple[str, ...], type_ref: TypeRef) -> "Accessor":
        """Create an accessor from a (path, type_ref) pair."""
        if isinstance(type_ref, (list, tuple)):
            return cls(path=tuple(path), target=type_ref[0], many=True)
        return cls(path=tuple(path), target=type_ref)

    def as_pair(self) -> tuple[list[str], TypeRef]:
        return list(self.path), self.type_ref


def _check_threshold(value: Any, owner: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"{owner}: threshold must be a positive number, got {value!r}")


def _check_max_depth(value: Any, owner: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigError(f"{owner}: max_depth must be a non-negative int, got {value!r}")


def _check_keys(data: Mapping[str, Any], allowed: set[str], owner: str) -> dict[str, Any]:
    normalized = convert_keys_to_snake(dict(data))
    unknown = sorted(set(normalized) - allowed)
    if unknown:
        raise ConfigError(f"{owner}: unknown config keys {unknown}")
    return normalized


@dataclass
class PluginConfig:
    """Global plugin configuration, applied when an entity sets nothing."""
    threshold: Optional[float] = None
    max_depth: Optional[int] = None
    id_field: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "PluginConfig":
        """Create config from dictionary (camelCase keys accepted)."""
        data = _check_keys(data or {}, {f.name for f in fields(cls)}, "plugin config")
        config = cls(**data)
        if config.threshold is not None:
            _check_threshold(config.threshold, "plugin config")
        if config.max_depth is not None:
            _check_max_depth(config.max_depth, "plugin config")
        return config

    def to_dict(self) -> dict[str, Any]:
        return {
            name: value
            for name, value in (
                ("threshold", self.threshold),
                ("max_depth", self.max_depth),
                ("id_field", self.id_field),
            )
            if value is not None
        }


@dataclass
class DenormalizerConfig:
    """
    Per-entity plugin configuration.

    An entity referencing others declares a ``schema``; an entity referenced
    by others declares at least ``get_one``. Both may be present.
    """
    schema: Optional[dict[str, Any]] = None
    get_one: Optional[str] = None
    get_some: Optional[str] = None
    get_all: Optional[str] = None
    threshold: Optional[float] = None
    max_depth: Optional[int] = None
    id_field: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], entity: str = "?") -> "DenormalizerConfig":
        """
        Create config from dictionary.

        Args:
            data: Raw ``plugins.denormalizer`` section of an entity config
            entity: Entity name, used in error messages

        Raises:
            ConfigError: On unknown keys or invalid values
        """
        owner = f"entity '{entity}'"
        allowed = {f.name for f in fields(cls)}
        data = _check_keys(data, allowed, owner)
        config = cls(**data)

        if config.schema is not None and not isinstance(config.schema, Mapping):
            raise ConfigError(f"{owner}: schema must be a mapping, got {config.schema!r}")
        for name in ("get_one", "get_some", "get_all", "id_field"):
            value = getattr(config, name)
            if value is not None and not isinstance(value, str):
                raise ConfigError(f"{owner}: {name} must be a function name, got {value!r}")
        if config.threshold is not None:
            _check_threshold(config.threshold, owner)
        if config.max_depth is not None:
            _check_max_depth(config.max_depth, owner)
        return config


def plugin_section(entity_config: Mapping[str, Any]) -> Optional[Mapping[str, Any]]:
    """Get the raw ``plugins.denormalizer`` section of an entity config."""
    plugins = entity_config.get("plugins") or {}
    return plugins.get(NAME)


def get_entity_config(entity_config: Mapping[str, Any], entity: str = "?") -> Optional[DenormalizerConfig]:
    """Parse the denormalizer section of an entity config, if it has one."""
    section = plugin_section(entity_config)
    if section is None:
        return None
    return DenormalizerConfig.from_dict(section, entity=entity)


def first_set(*values: Any, default: Any = None) -> Any:
    """Return the first value that is not None (entity -> global -> default)."""
    for value in values:
        if value is not None:
            return value
    return default
