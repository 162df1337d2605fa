"""
Denormalizer - schema-driven resolution of foreign-key references.

Entities store references as ids (a single id, a list of ids, or ids inside
nested objects). Decorated entity functions return those references
replaced by the referenced entities, fetched in batches per type and
resolved recursively up to a depth limit.

Usage:
    from denormalizer import build_api

    api = build_api({
        "user": {
            "api": {"get_user": get_user},
            "plugins": {"denormalizer": {"get_one": "get_user"}},
        },
        "message": {
            "api": {"get_message": get_message},
            "plugins": {"denormalizer": {"schema": {"author": "user"}}},
        },
    })
    message = await api["message"]["get_message"]("x")
"""

from __future__ import annotations

from .core import (
    Accessor,
    ConfigError,
    DenormalizerConfig,
    DenormalizerError,
    MissingGetOneError,
    MissingTypeConfigError,
    NotFinalizedError,
    PluginConfig,
    SchemaError,
    ServiceError,
    extract_accessors,
    extract_types,
    get_path,
    parse_schema,
    set_path,
)
from .runtime import (
    BoundFetcher,
    Denormalizer,
    DenormalizedFunction,
    EntityListResponse,
    FetcherDef,
    ResolutionContext,
    ServiceClient,
    bind_fetchers,
    build_api,
    denormalizer,
    extract_fetchers,
    resolve,
)

__version__ = "0.1.0"

__all__ = [
    # Plugin
    "denormalizer",
    "Denormalizer",
    "DenormalizedFunction",
    "build_api",
    # Definitions
    "Accessor",
    "PluginConfig",
    "DenormalizerConfig",
    "ResolutionContext",
    "FetcherDef",
    "BoundFetcher",
    # Schema & fetchers
    "parse_schema",
    "extract_accessors",
    "extract_types",
    "extract_fetchers",
    "bind_fetchers",
    "resolve",
    # Paths
    "get_path",
    "set_path",
    # HTTP
    "ServiceClient",
    "EntityListResponse",
    # Errors
    "DenormalizerError",
    "ConfigError",
    "SchemaError",
    "MissingTypeConfigError",
    "MissingGetOneError",
    "NotFinalizedError",
    "ServiceError",
]
