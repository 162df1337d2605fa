"""
Utility functions for the denormalizer.

Config keys may be written camelCase (getOne, maxDepth) the way the
JavaScript hosts spell them; they are normalized to snake_case here.
"""

from __future__ import annotations

import re
from typing import Any


# Pre-compiled regex patterns for better performance
_CAMEL_TO_SNAKE_PATTERN = re.compile(r'(?<!^)(?=[A-Z])')


def to_snake_case(name: str) -> str:
    """
    Convert camelCase to snake_case.

    Examples:
        getOne -> get_one
        maxDepth -> max_depth
        get_some -> get_some
    """
    # Handle consecutive uppercase (HTTP -> http)
    result = re.sub(r'([A-Z]+)([A-Z][a-z])', r'\1_\2', name)
    result = _CAMEL_TO_SNAKE_PATTERN.sub('_', result)
    return result.lower()


def convert_keys_to_snake(data: dict[str, Any]) -> dict[str, Any]:
    """
    Convert the top-level keys of a dict from camelCase to snake_case.

    Values are left untouched, so a nested schema keeps its field names.
    """
    return {to_snake_case(k): v for k, v in data.items()}
