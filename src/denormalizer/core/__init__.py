"""
Core module - definitions, errors, schema flattening and path helpers.
"""

from __future__ import annotations

from .defs import (
    DEFAULT_ID_FIELD,
    DEFAULT_MAX_DEPTH,
    DEFAULT_THRESHOLD,
    NAME,
    Accessor,
    DenormalizerConfig,
    PluginConfig,
    TypeRef,
    get_entity_config,
)
from .errors import (
    ConfigError,
    DenormalizerError,
    MissingGetOneError,
    MissingTypeConfigError,
    NotFinalizedError,
    SchemaError,
    ServiceError,
)
from .paths import get_path, set_path
from .schema import extract_accessors, extract_types, index_configs, parse_schema

__all__ = [
    # Definitions
    "NAME",
    "DEFAULT_THRESHOLD",
    "DEFAULT_MAX_DEPTH",
    "DEFAULT_ID_FIELD",
    "Accessor",
    "TypeRef",
    "PluginConfig",
    "DenormalizerConfig",
    "get_entity_config",
    # Errors
    "DenormalizerError",
    "ConfigError",
    "SchemaError",
    "MissingTypeConfigError",
    "MissingGetOneError",
    "NotFinalizedError",
    "ServiceError",
    # Schema
    "parse_schema",
    "extract_accessors",
    "extract_types",
    "index_configs",
    # Paths
    "get_path",
    "set_path",
]
