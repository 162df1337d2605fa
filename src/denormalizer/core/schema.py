"""
Reference schemas - flattening and accessor extraction.

A schema describes where an entity stores foreign keys:

    {
        "author": "user",               # to-one
        "visibleTo": ["user"],          # to-many
        "nestedData": {
            "comments": ["comment"],    # nested to-many
        },
    }

Flattening yields one Accessor per leaf:

    author              -> user
    visibleTo           -> [user]
    nestedData.comments -> [comment]
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Union

from .defs import Accessor, TypeRef, get_entity_config
from .errors import SchemaError


EntityConfigs = Union[Mapping[str, Mapping[str, Any]], Iterable[Mapping[str, Any]]]


def _is_leaf(value: Any) -> bool:
    return isinstance(value, (str, list, tuple))


def _check_leaf(path: str, value: Any) -> TypeRef:
    if isinstance(value, str) and value:
        return value
    if (
        isinstance(value, (list, tuple))
        and len(value) == 1
        and isinstance(value[0], str)
        and value[0]
    ):
        return [value[0]]
    raise SchemaError(path, value)


def parse_schema(schema: Mapping[str, Any]) -> dict[str, TypeRef]:
    """
    Flatten a nested schema into a mapping of dotted path -> type reference.

    Args:
        schema: Nested schema mapping

    Returns:
        Flat dict, e.g. {"nestedData.comments": ["comment"]}

    Raises:
        SchemaError: If a leaf is neither a type name nor [type name]
    """
    flat: dict[str, TypeRef] = {}
    for field_name, value in schema.items():
        if _is_leaf(value):
            flat[field_name] = _check_leaf(field_name, value)
        elif isinstance(value, Mapping):
            for sub_path, type_ref in parse_schema(value).items():
                flat[f"{field_name}.{sub_path}"] = type_ref
        else:
            raise SchemaError(field_name, value)
    return flat


def index_configs(entity_configs: EntityConfigs) -> dict[str, Mapping[str, Any]]:
    """Normalize a name->config mapping or a list of named configs to a dict."""
    if isinstance(entity_configs, Mapping):
        return {config.get("name", name): config for name, config in entity_configs.items()}
    return {config["name"]: config for config in entity_configs}


def extract_accessors(entity_configs: EntityConfigs) -> dict[str, list[Accessor]]:
    """
    Build the accessor list of every entity that declares a schema.

    Pure: nothing is fetched or decorated, so this can be used on its own
    for introspection.

    Args:
        entity_configs: Mapping of entity name -> config, or iterable of
            configs carrying a "name"

    Returns:
        Dict mapping entity name -> list of Accessors
    """
    accessors: dict[str, list[Accessor]] = {}
    for name, config in index_configs(entity_configs).items():
        plugin_config = get_entity_config(config, entity=name)
        if plugin_config is None or plugin_config.schema is None:
            continue
        accessors[name] = [
            Accessor.from_pair(path.split("."), type_ref)
            for path, type_ref in parse_schema(plugin_config.schema).items()
        ]
    return accessors


def extract_types(accessors: Mapping[str, list[Accessor]]) -> list[str]:
    """Get all distinct types referenced by any accessor, sorted."""
    return sorted({a.target for entity_accessors in accessors.values() for a in entity_accessors})
