"""BindingConfiguration — what to convert and where to put it."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from fastapi_param_converter._types import TargetType


@dataclass(frozen=True)
class BindingConfiguration:
    """Per-route binding description handed to param converters.

    ``name`` is the attribute the converted value is stored under and
    ``target`` the type (or dotted path to it) to convert into. ``options``
    is free-form; the request body converter understands the
    ``deserializationContext`` and ``validator`` keys.
    """

    name: str | None
    target: TargetType | None = None
    options: Mapping[str, Any] = field(default_factory=dict)
    converter: str | None = None
    is_optional: bool = False

    def __post_init__(self) -> None:
        # Read-only view so converters cannot leak state between requests
        object.__setattr__(self, "options", MappingProxyType(dict(self.options)))

    @property
    def target_name(self) -> str | None:
        if self.target is None:
            return None
        if isinstance(self.target, str):
            return self.target
        return f"{self.target.__module__}.{self.target.__qualname__}"
