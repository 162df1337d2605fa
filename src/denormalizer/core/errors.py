"""
Custom exceptions for the denormalizer.
"""

from __future__ import annotations

from typing import Optional


class DenormalizerError(Exception):
    """Base exception for all denormalizer errors."""
    pass


class ConfigError(DenormalizerError):
    """Raised when plugin or entity configuration is invalid."""
    pass


class SchemaError(ConfigError):
    """Raised when a reference schema contains an invalid leaf."""

    def __init__(self, path: str, value: object):
        self.path = path
        self.value = value
        super().__init__(
            f"Invalid schema leaf at '{path}': expected a type name or a "
            f"one-element list of a type name, got {value!r}"
        )


class MissingTypeConfigError(ConfigError):
    """Raised when a referenced type has no denormalizer configuration."""

    def __init__(self, type_name: str):
        self.type_name = type_name
        super().__init__(f"No denormalizer config found for type '{type_name}'")


class MissingGetOneError(ConfigError):
    """Raised when a referenced type does not expose a usable get_one function."""

    def __init__(self, type_name: str, fn_name: Optional[str] = None):
        self.type_name = type_name
        self.fn_name = fn_name
        detail = f" ('{fn_name}' is not in its api)" if fn_name else ""
        super().__init__(f"No 'get_one' accessor defined on type '{type_name}'{detail}")


class NotFinalizedError(DenormalizerError):
    """Raised when a decorated function needs fetchers before finalize() ran."""

    def __init__(self, entity: str):
        self.entity = entity
        super().__init__(
            f"Denormalizer used by '{entity}' before finalize(); "
            f"decorate all entity functions and call finalize() first"
        )


class ServiceError(DenormalizerError):
    """Raised when a backend service call fails."""

    def __init__(self, service: str, status_code: int, message: str):
        self.service = service
        self.status_code = status_code
        super().__init__(f"Service '{service}' returned {status_code}: {message}")
