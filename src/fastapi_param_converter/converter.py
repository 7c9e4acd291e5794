"""ParamConverter abstract base class."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from fastapi_param_converter.configuration import BindingConfiguration
from fastapi_param_converter.context import RequestContext


class ParamConverter(ABC):
    """Base abstraction for units that turn request data into endpoint values."""

    @abstractmethod
    def supports(self, config: BindingConfiguration) -> bool: ...

    @abstractmethod
    def apply(self, ctx: RequestContext, config: BindingConfiguration) -> None: ...

    def openapi_spec(self, config: BindingConfiguration) -> dict[str, Any] | None:
        return None
