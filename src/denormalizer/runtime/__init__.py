"""
Runtime module - fetcher binding, batch resolution and the plugin.
"""

from __future__ import annotations

from .context import ResolutionContext
from .fetchers import BoundFetcher, FetcherDef, bind_fetchers, extract_fetchers
from .plugin import Denormalizer, DenormalizedFunction, build_api, denormalizer
from .resolver import collect_targets, request_entities, resolve, resolve_item
from .service_client import EntityListResponse, ServiceClient

__all__ = [
    "ResolutionContext",
    "FetcherDef",
    "BoundFetcher",
    "extract_fetchers",
    "bind_fetchers",
    "collect_targets",
    "request_entities",
    "resolve_item",
    "resolve",
    "Denormalizer",
    "DenormalizedFunction",
    "denormalizer",
    "build_api",
    "ServiceClient",
    "EntityListResponse",
]
