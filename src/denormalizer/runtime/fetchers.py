"""
Fetcher resolution - how ids of each referenced type are retrieved.

Two phases:
1. extract_fetchers: at build time, validate every referenced type's config
   and record function names and thresholds (FetcherDef).
2. bind_fetchers: once all entity functions are decorated, turn the names
   into callables (BoundFetcher).
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, Mapping, Optional

from ..core.defs import (
    DEFAULT_ID_FIELD,
    DEFAULT_THRESHOLD,
    PluginConfig,
    first_set,
    get_entity_config,
)
from ..core.errors import MissingGetOneError, MissingTypeConfigError
from .context import ResolutionContext

logger = logging.getLogger(__name__)

# Context-aware call: invoker(context, *args) -> awaitable result
Invoker = Callable[..., Awaitable[Any]]


@dataclass(frozen=True)
class FetcherDef:
    """Fetch function names and batching settings of one referenced type."""
    type_name: str
    get_one: str
    get_some: Optional[str] = None
    get_all: Optional[str] = None
    threshold: float = DEFAULT_THRESHOLD
    id_field: str = DEFAULT_ID_FIELD


@dataclass(frozen=True)
class BoundFetcher:
    """
    FetcherDef with its functions resolved.

    Each callable takes the ResolutionContext first:
        get_one(context, id), get_some(context, ids), get_all(context)
    """
    definition: FetcherDef
    get_one: Invoker
    get_some: Invoker
    get_all: Optional[Invoker] = None

    @property
    def threshold(self) -> float:
        return self.definition.threshold

    @property
    def id_field(self) -> str:
        return self.definition.id_field


def extract_fetchers(
    plugin_config: PluginConfig,
    entity_configs: Mapping[str, Mapping[str, Any]],
    types: Iterable[str],
) -> dict[str, FetcherDef]:
    """
    Build a FetcherDef for every referenced type.

    Args:
        plugin_config: Global plugin configuration
        entity_configs: Mapping of entity name -> entity config
        types: Types referenced by any accessor

    Returns:
        Dict mapping type name -> FetcherDef

    Raises:
        MissingTypeConfigError: A referenced type has no denormalizer config
        MissingGetOneError: A referenced type has no usable get_one
    """
    fetchers: dict[str, FetcherDef] = {}

    for type_name in types:
        entity_config = entity_configs.get(type_name)
        conf = get_entity_config(entity_config, entity=type_name) if entity_config else None
        if conf is None:
            raise MissingTypeConfigError(type_name)

        api = entity_config.get("api") or {}
        if not conf.get_one:
            raise MissingGetOneError(type_name)
        if conf.get_one not in api:
            raise MissingGetOneError(type_name, conf.get_one)

        def from_api(name: Optional[str], kind: str) -> Optional[str]:
            if name is None:
                return None
            if name not in api:
                logger.warning(f"Type '{type_name}': {kind} '{name}' is not in its api, ignoring")
                return None
            return name

        fetchers[type_name] = FetcherDef(
            type_name=type_name,
            get_one=conf.get_one,
            get_some=from_api(conf.get_some, "get_some"),
            get_all=from_api(conf.get_all, "get_all"),
            threshold=first_set(conf.threshold, plugin_config.threshold, default=DEFAULT_THRESHOLD),
            id_field=first_set(conf.id_field, plugin_config.id_field, default=DEFAULT_ID_FIELD),
        )

    return fetchers


def _fan_out(get_one: Invoker) -> Invoker:
    """Default get_some: concurrent get_one calls, one per id."""
    async def get_some(context: ResolutionContext, ids: list[Any]) -> list[Any]:
        return list(await asyncio.gather(*(get_one(context, id_) for id_ in ids)))

    return get_some


def _raw_invoker(fn: Callable[..., Awaitable[Any]]) -> Invoker:
    """Wrap an undecorated api function; the context stops here."""
    async def invoke(context: ResolutionContext, *args: Any) -> Any:
        return await fn(*args)

    return invoke


def bind_fetchers(
    fetchers: Mapping[str, FetcherDef],
    invokers: Mapping[str, Mapping[str, Invoker]],
    entity_configs: Mapping[str, Mapping[str, Any]],
) -> dict[str, BoundFetcher]:
    """
    Resolve fetcher function names to callables.

    Decorated functions are preferred so nested results keep being
    resolved. A function the host never decorated falls back to the raw
    api function, whose results are returned as they are.

    Args:
        fetchers: FetcherDefs from extract_fetchers
        invokers: entity name -> fn name -> context-aware invoker
        entity_configs: Mapping of entity name -> entity config

    Returns:
        Dict mapping type name -> BoundFetcher
    """
    bound: dict[str, BoundFetcher] = {}

    for type_name, definition in fetchers.items():
        entity_invokers = invokers.get(type_name, {})
        api = entity_configs[type_name].get("api") or {}

        def lookup(name: Optional[str]) -> Optional[Invoker]:
            if name is None:
                return None
            invoker = entity_invokers.get(name)
            if invoker is not None:
                return invoker
            logger.debug(f"Type '{type_name}': '{name}' is not decorated, using raw api function")
            return _raw_invoker(api[name])

        get_one = lookup(definition.get_one)
        bound[type_name] = BoundFetcher(
            definition=definition,
            get_one=get_one,
            get_some=lookup(definition.get_some) or _fan_out(get_one),
            get_all=lookup(definition.get_all),
        )

    return bound
