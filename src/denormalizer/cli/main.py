#!/usr/bin/env python3
"""
Denormalizer CLI - inspect and check reference schemas.

Usage:
    denormalizer accessors [config.yaml]   # List accessors per entity
    denormalizer types [config.yaml]       # List referenced types
    denormalizer check [config.yaml]       # Validate fetcher configuration
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from ..core.errors import ConfigError
from ..core.schema import extract_accessors, extract_types
from ..runtime.fetchers import extract_fetchers
from .config import DEFAULT_CONFIG_PATH, DenormalizerFileConfig, load_config


def _load(args: argparse.Namespace) -> DenormalizerFileConfig | None:
    config = load_config(args.config)
    if config is None:
        print(f"Error: {args.config} not found.")
    return config


def cmd_accessors(args: argparse.Namespace) -> int:
    """Print the accessors of every entity with a schema."""
    config = _load(args)
    if not config:
        return 1

    try:
        accessors = extract_accessors(config.entities)
    except ConfigError as e:
        print(f"Error: {e}")
        return 1

    if args.json:
        print(json.dumps(
            {name: [a.as_pair() for a in entity_accessors] for name, entity_accessors in accessors.items()},
            indent=2,
        ))
        return 0

    for name, entity_accessors in accessors.items():
        print(f"{name}:")
        for accessor in entity_accessors:
            target = f"[{accessor.target}]" if accessor.many else accessor.target
            print(f"  {'.'.join(accessor.path)} -> {target}")
    return 0


def cmd_types(args: argparse.Namespace) -> int:
    """Print every type referenced by a schema."""
    config = _load(args)
    if not config:
        return 1

    try:
        types = extract_types(extract_accessors(config.entities))
    except ConfigError as e:
        print(f"Error: {e}")
        return 1

    for type_name in types:
        print(type_name)
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    """Validate that every referenced type can be fetched."""
    config = _load(args)
    if not config:
        return 1

    try:
        types = extract_types(extract_accessors(config.entities))
        fetchers = extract_fetchers(config.plugin, config.entities, types)
    except ConfigError as e:
        print(f"Error: {e}")
        return 1

    for type_name, fetcher in fetchers.items():
        print(
            f"{type_name}: get_one={fetcher.get_one} get_some={fetcher.get_some or '-'} "
            f"get_all={fetcher.get_all or '-'} threshold={fetcher.threshold} id_field={fetcher.id_field}"
        )
    print("Configuration OK")
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="denormalizer",
        description="Denormalizer - inspect reference schemas and fetcher configs"
    )
    parser.add_argument("--version", action="version", version="%(prog)s 0.1.0")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    for name, help_text in (
        ("accessors", "List accessors per entity"),
        ("types", "List referenced types"),
        ("check", "Validate fetcher configuration"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("config", nargs="?", default=DEFAULT_CONFIG_PATH, help="Path to YAML config")
        if name == "accessors":
            sub.add_argument("--json", action="store_true", help="Print as JSON")

    return parser


def app(args: Optional[List[str]] = None) -> int:
    """Main CLI application."""
    parser = create_parser()
    parsed = parser.parse_args(args)

    logging.basicConfig(
        level=logging.DEBUG if parsed.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not parsed.command:
        parser.print_help()
        return 0

    commands = {
        "accessors": cmd_accessors,
        "types": cmd_types,
        "check": cmd_check,
    }

    handler = commands.get(parsed.command)
    if handler:
        return handler(parsed)

    parser.print_help()
    return 1


def main() -> None:
    """Entry point for CLI."""
    sys.exit(app())


if __name__ == "__main__":
    main()
