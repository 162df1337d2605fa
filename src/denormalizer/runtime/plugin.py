"""
Denormalizer plugin - decorates entity functions so their results come back
with foreign keys replaced by the referenced entities.

Usage:
    plugin = Denormalizer(entity_configs, {"max_depth": 3})

    # Phase 1: decorate every exposed entity function
    get_message = plugin("message", api.get_message)
    get_user = plugin("user", api.get_user)

    # Phase 2: bind cross-entity fetchers once everything is decorated
    plugin.finalize()

    message = await get_message("x")   # message["author"] is now a user dict

Or, to decorate a whole entity-config mapping at once:
    api = build_api(entity_configs)
    message = await api["message"]["get_message"]("x")
"""

from __future__ import annotations

import functools
import logging
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Mapping, Optional, Union

from ..core.defs import (
    DEFAULT_MAX_DEPTH,
    PluginConfig,
    first_set,
    get_entity_config,
)
from ..core.errors import NotFinalizedError
from ..core.schema import EntityConfigs, extract_accessors, extract_types, index_configs
from .context import ResolutionContext
from .fetchers import BoundFetcher, Invoker, bind_fetchers, extract_fetchers
from .resolver import resolve

logger = logging.getLogger(__name__)

AsyncFn = Callable[..., Awaitable[Any]]


class DenormalizedFunction:
    """
    Entity function whose result is denormalized.

    Calling it works exactly like calling the wrapped function. Nested
    fetches go through invoke(), which carries the ResolutionContext
    without touching the wrapped function's arguments.
    """

    def __init__(self, plugin: "Denormalizer", entity: str, fn: AsyncFn, fn_name: str):
        functools.update_wrapper(self, fn)
        self.plugin = plugin
        self.entity = entity
        self.fn = fn
        self.fn_name = fn_name

    async def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return await self.invoke(self.plugin.root_context(self.entity), *args, **kwargs)

    async def invoke(self, context: ResolutionContext, *args: Any, **kwargs: Any) -> Any:
        """Call the wrapped function and resolve its result at context's level."""
        result = await self.fn(*args, **kwargs)
        return await self.plugin.denormalize(self.entity, context, result)

    def __repr__(self) -> str:
        return f"<DenormalizedFunction {self.entity}.{self.fn_name}>"


class Denormalizer:
    """
    Plugin instance for one set of entity configs.

    Building it validates every schema and fetcher config; errors surface
    immediately as ConfigError subclasses.

    Args:
        entity_configs: Mapping of entity name -> config, or iterable of
            configs carrying a "name"
        plugin_config: Global plugin config (PluginConfig or dict)
    """

    def __init__(
        self,
        entity_configs: EntityConfigs,
        plugin_config: Union[PluginConfig, Mapping[str, Any], None] = None,
    ):
        if not isinstance(plugin_config, PluginConfig):
            plugin_config = PluginConfig.from_dict(plugin_config)
        self.plugin_config = plugin_config
        self.entity_configs = index_configs(entity_configs)
        self.accessors = extract_accessors(self.entity_configs)
        self.fetcher_defs = extract_fetchers(
            self.plugin_config,
            self.entity_configs,
            extract_types(self.accessors),
        )
        self._max_depths = {
            name: self._resolve_max_depth(name, config)
            for name, config in self.entity_configs.items()
        }
        self._invokers: dict[str, dict[str, Invoker]] = {}
        self._fetchers: Optional[Mapping[str, BoundFetcher]] = None

    def _resolve_max_depth(self, name: str, config: Mapping[str, Any]) -> int:
        entity_conf = get_entity_config(config, entity=name)
        return first_set(
            entity_conf.max_depth if entity_conf else None,
            self.plugin_config.max_depth,
            default=DEFAULT_MAX_DEPTH,
        )

    # =========================================================================
    # Phase 1: decoration
    # =========================================================================

    def __call__(
        self,
        entity: Union[str, Mapping[str, Any]],
        fn: AsyncFn,
        fn_name: Optional[str] = None,
    ) -> DenormalizedFunction:
        """
        Decorate an entity function.

        Args:
            entity: Entity name, or entity config carrying a "name"
            fn: Async function returning an item or a list of items
            fn_name: Name under which fetcher configs refer to fn
                (default: the key of fn in the entity's api, else fn.__name__)
        """
        entity_name = entity if isinstance(entity, str) else entity["name"]
        fn_name = fn_name or self._api_name(entity_name, fn)
        decorated = DenormalizedFunction(self, entity_name, fn, fn_name)
        self._invokers.setdefault(entity_name, {})[fn_name] = decorated.invoke
        return decorated

    def _api_name(self, entity: str, fn: AsyncFn) -> str:
        """Key under which fn appears in the entity's api (bound methods compare equal)."""
        api = self.entity_configs.get(entity, {}).get("api") or {}
        if isinstance(api, Mapping):
            for name, api_fn in api.items():
                if api_fn == fn:
                    return name
        return fn.__name__

    # =========================================================================
    # Phase 2: binding
    # =========================================================================

    @property
    def finalized(self) -> bool:
        return self._fetchers is not None

    def finalize(self) -> "Denormalizer":
        """Bind fetchers to the decorated functions. Safe to call repeatedly."""
        if self._fetchers is None:
            self._fetchers = MappingProxyType(
                bind_fetchers(self.fetcher_defs, self._invokers, self.entity_configs)
            )
            logger.info(
                f"Denormalizer finalized: {len(self.accessors)} entities with schemas, "
                f"{len(self._fetchers)} referenced types"
            )
        return self

    # =========================================================================
    # Resolution
    # =========================================================================

    def max_depth(self, entity: str) -> int:
        """Depth limit for calls made by the host (entity -> global -> 12)."""
        return self._max_depths.get(entity, first_set(self.plugin_config.max_depth, default=DEFAULT_MAX_DEPTH))

    def root_context(self, entity: str) -> ResolutionContext:
        return ResolutionContext(level=0, max_depth=self.max_depth(entity))

    async def denormalize(self, entity: str, context: ResolutionContext, result: Any) -> Any:
        """
        Resolve the references of a function result.

        A list (or tuple) result comes back as a list, anything else as a
        single item. Entities without a schema pass through untouched.
        """
        accessors = self.accessors.get(entity)
        if not accessors or result is None:
            return result

        if context.exhausted:
            logger.debug(f"Skipping {entity} resolution: level {context.level} >= max_depth {context.max_depth}")
            return result

        if self._fetchers is None:
            raise NotFinalizedError(entity)

        many = isinstance(result, (list, tuple))
        items = list(result) if many else [result]
        resolved = await resolve(self._fetchers, accessors, context, items)
        return resolved if many else resolved[0]


def denormalizer(
    plugin_config: Union[PluginConfig, Mapping[str, Any], None] = None,
) -> Callable[[EntityConfigs], Denormalizer]:
    """
    Plugin factory.

    Example:
        setup = denormalizer({"threshold": 50})
        plugin = setup(entity_configs)
        wrapped = plugin("message", get_message)
        plugin.finalize()
    """
    def setup(entity_configs: EntityConfigs) -> Denormalizer:
        return Denormalizer(entity_configs, plugin_config)

    return setup


def build_api(
    entity_configs: EntityConfigs,
    plugin_config: Union[PluginConfig, Mapping[str, Any], None] = None,
) -> dict[str, dict[str, DenormalizedFunction]]:
    """
    Decorate every api function of every entity and finalize.

    Returns:
        Dict mapping entity name -> function name -> DenormalizedFunction
    """
    plugin = Denormalizer(entity_configs, plugin_config)
    api = {
        name: {
            fn_name: plugin(name, fn, fn_name)
            for fn_name, fn in (config.get("api") or {}).items()
        }
        for name, config in plugin.entity_configs.items()
    }
    plugin.finalize()
    return api
