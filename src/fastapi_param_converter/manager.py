"""ParamConverterManager — ordered registry and dispatcher for converters."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from loguru import logger

from fastapi_param_converter.configuration import BindingConfiguration
from fastapi_param_converter.context import RequestContext
from fastapi_param_converter.converter import ParamConverter
from fastapi_param_converter.exceptions import ConfigurationError


@dataclass(frozen=True)
class _Registration:
    converter: ParamConverter
    priority: int
    index: int


class ParamConverterManager:
    """Ordered container of ParamConverter instances.

    Converters with a higher priority are tried first; equal priorities keep
    registration order.
    """

    def __init__(self, *converters: ParamConverter) -> None:
        self._registrations: list[_Registration] = []
        self._named: dict[str, ParamConverter] = {}
        self._resolved: tuple[ParamConverter, ...] | None = None
        for converter in converters:
            self.add(converter)

    def add(
        self,
        converter: ParamConverter,
        priority: int = 0,
        name: str | None = None,
    ) -> ParamConverterManager:
        self._registrations.append(
            _Registration(converter, priority, len(self._registrations))
        )
        if name is not None:
            if name in self._named:
                raise ConfigurationError(f'Converter "{name}" is already registered')
            self._named[name] = converter
        self._resolved = None
        return self

    def all(self) -> tuple[ParamConverter, ...]:
        if self._resolved is None:
            ordered = sorted(
                self._registrations, key=lambda r: (-r.priority, r.index)
            )
            self._resolved = tuple(r.converter for r in ordered)
        return self._resolved

    def get(self, name: str) -> ParamConverter:
        try:
            return self._named[name]
        except KeyError:
            raise ConfigurationError(f'No converter named "{name}" found') from None

    def find(self, config: BindingConfiguration) -> ParamConverter | None:
        """Return the converter responsible for ``config``, if any."""
        if config.converter is not None:
            converter = self.get(config.converter)
            if not converter.supports(config):
                raise ConfigurationError(
                    f'Converter "{config.converter}" does not support '
                    f'the conversion of parameter "{config.name}"'
                )
            return converter

        for converter in self.all():
            if converter.supports(config):
                return converter
        return None

    def apply(
        self,
        ctx: RequestContext,
        configurations: BindingConfiguration | Iterable[BindingConfiguration],
    ) -> None:
        if isinstance(configurations, BindingConfiguration):
            configurations = (configurations,)

        for config in configurations:
            converter = self.find(config)
            if converter is None:
                logger.debug(
                    f"No converter supports parameter {config.name!r}"
                    f"{' (optional)' if config.is_optional else ''}, skipping"
                )
                continue
            logger.debug(
                f"Applying {type(converter).__name__} to parameter {config.name!r}"
            )
            converter.apply(ctx, config)
