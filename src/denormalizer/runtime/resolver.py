"""
Batch resolver - replaces foreign-key ids in a batch of items with entities.

Handles:
- Collecting ids per referenced type across all items and accessors
- Choosing get_one / get_some / get_all per type
- Fetching all types concurrently
- Writing resolved entities back at each accessor path
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Sequence

from ..core.defs import Accessor
from ..core.paths import get_path, set_path
from .context import ResolutionContext
from .fetchers import BoundFetcher

logger = logging.getLogger(__name__)


def collect_targets(accessors: Sequence[Accessor], items: Sequence[Any]) -> dict[str, list[Any]]:
    """
    Collect the ids referenced by items, grouped by target type.

    None values are kept here; request_entities drops them.
    """
    targets: dict[str, list[Any]] = {}
    for item in items:
        for accessor in accessors:
            ids = targets.setdefault(accessor.target, [])
            value = get_path(accessor.path, item)
            if isinstance(value, (list, tuple)):
                ids.extend(value)
            else:
                ids.append(value)
    return targets


def _distinct(ids: Sequence[Any]) -> list[Any]:
    """Non-None ids, deduplicated, first-seen order."""
    return list(dict.fromkeys(id_ for id_ in ids if id_ is not None))


async def request_entities(
    fetcher: BoundFetcher,
    context: ResolutionContext,
    ids: Sequence[Any],
) -> list[Any]:
    """
    Fetch the entities for ids of one type.

    Strategy:
    - no ids: nothing is fetched (get_some is not called with an empty list)
    - exactly one id: get_one
    - more ids than the threshold and get_all configured: get_all
    - otherwise: get_some with the distinct ids
    """
    valid_ids = _distinct(ids)
    type_name = fetcher.definition.type_name
    next_context = context.descend()

    if not valid_ids:
        return []

    if len(valid_ids) == 1:
        logger.debug(f"Fetching {type_name} {valid_ids[0]!r} with get_one (level {next_context.level})")
        return [await fetcher.get_one(next_context, valid_ids[0])]

    if len(valid_ids) > fetcher.threshold and fetcher.get_all is not None:
        logger.debug(
            f"Fetching all {type_name}: {len(valid_ids)} ids > threshold {fetcher.threshold} "
            f"(level {next_context.level})"
        )
        return list(await fetcher.get_all(next_context) or [])

    logger.debug(f"Fetching {len(valid_ids)} {type_name} with get_some (level {next_context.level})")
    return list(await fetcher.get_some(next_context, valid_ids) or [])


def index_entities(entities: Sequence[Any], id_field: str) -> dict[Any, Any]:
    """Build id -> entity map, skipping missing (None) entities."""
    return {
        get_path([id_field], entity): entity
        for entity in entities
        if entity is not None
    }


def resolve_item(
    accessors: Sequence[Accessor],
    entities: Mapping[str, Mapping[Any, Any]],
    item: Any,
) -> Any:
    """
    Return a copy of item with every accessor path holding resolved entities.

    None ids stay None, unknown ids become None. When two accessors write
    overlapping paths the later one wins.
    """
    resolved = item
    for accessor in accessors:
        value = get_path(accessor.path, item)
        if value is None:
            continue

        by_id = entities.get(accessor.target, {})

        def lookup(id_: Any) -> Any:
            return None if id_ is None else by_id.get(id_)

        if isinstance(value, (list, tuple)):
            new_value = [lookup(id_) for id_ in value]
        else:
            new_value = lookup(value)
        resolved = set_path(accessor.path, new_value, resolved)
    return resolved


async def resolve(
    fetchers: Mapping[str, BoundFetcher],
    accessors: Sequence[Accessor],
    context: ResolutionContext,
    items: Sequence[Any],
) -> list[Any]:
    """
    Resolve the foreign keys of a batch of items.

    Args:
        fetchers: Bound fetchers per type
        accessors: Accessors of the items' entity
        context: Context of the call that produced the items
        items: Items to resolve

    Returns:
        New list of items; the input items are not modified.
        Within one call every (type, id) is fetched at most once and the
        same entity object is shared by all items referencing it.
    """
    targets = collect_targets(accessors, items)
    types = list(targets)

    results = await asyncio.gather(*(
        request_entities(fetchers[type_name], context, targets[type_name])
        for type_name in types
    ))

    entities = {
        type_name: index_entities(found, fetchers[type_name].id_field)
        for type_name, found in zip(types, results)
    }
    return [resolve_item(accessors, entities, item) for item in items]
