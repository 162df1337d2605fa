"""
Resolution context - depth tracking for recursive denormalization.

Every entity function exposed through the plugin is itself decorated, so
resolving a reference re-enters the plugin for the referenced type. The
context travels along that chain and stops it at max_depth.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any

from ..core.defs import DEFAULT_MAX_DEPTH


@dataclass(frozen=True)
class ResolutionContext:
    """
    Context passed through nested fetch calls.

    Contains:
    - level: 0 for calls made by the host, +1 for each nested fetch
    - max_depth: resolution stops once level reaches it
    - extra: passthrough parameters, forwarded unchanged
    """
    level: int = 0
    max_depth: int = DEFAULT_MAX_DEPTH
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def exhausted(self) -> bool:
        """True when results at this level must be returned unresolved."""
        return self.level >= self.max_depth

    def descend(self) -> "ResolutionContext":
        """Context for a fetch issued while resolving at this level."""
        return dataclasses.replace(self, level=self.level + 1)
