"""Serializer protocol, deserialization context and the pydantic-backed default."""

from __future__ import annotations

import importlib
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable
from urllib.parse import parse_qsl

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from fastapi_param_converter._types import TargetType
from fastapi_param_converter.exceptions import (
    ConfigurationError,
    SerializerError,
    UnsupportedFormat,
)


@runtime_checkable
class Serializer(Protocol):
    """Pluggable interface turning raw payloads into typed objects.

    ``context`` is either a :class:`DeserializationContext` or a
    serializer-specific mapping. Callers omit it entirely when no context
    was requested.
    """

    def deserialize(
        self, data: bytes, type_: TargetType, format: str, context: Any = None
    ) -> Any: ...


@dataclass(frozen=True)
class DeserializationContext:
    """Group filters, version tag and extra format-specific attributes."""

    groups: tuple[str, ...] = ()
    version: str | None = None
    attributes: Mapping[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = dict(self.attributes)
        if self.groups:
            result["groups"] = list(self.groups)
        if self.version is not None:
            result["version"] = self.version
        return result


def resolve_type(target: TargetType) -> Any:
    """Return ``target`` itself, or import it when given as a dotted path.

    Both ``package.module.Class`` and ``package.module:Class`` are accepted.
    """
    if not isinstance(target, str):
        return target

    if ":" in target:
        module_name, _, attr_path = target.partition(":")
    else:
        module_name, _, attr_path = target.rpartition(".")
    if not module_name or not attr_path:
        raise ConfigurationError(f"Cannot resolve type {target!r}")

    try:
        obj: Any = importlib.import_module(module_name)
        for part in attr_path.split("."):
            obj = getattr(obj, part)
    except (ImportError, AttributeError) as exc:
        raise ConfigurationError(f"Cannot resolve type {target!r}") from exc
    return obj


def _validation_context(context: Any) -> dict[str, Any] | None:
    if context is None:
        return None
    if isinstance(context, DeserializationContext):
        return context.as_dict()
    if isinstance(context, Mapping):
        return dict(context)
    raise SerializerError(
        f"Unsupported deserialization context: {type(context).__name__}"
    )


def _form_fields(query: str) -> dict[str, Any]:
    """Parse an urlencoded body; repeated keys collect into a list."""
    fields: dict[str, Any] = {}
    for key, value in parse_qsl(query, keep_blank_values=True):
        if key not in fields:
            fields[key] = value
        elif isinstance(fields[key], list):
            fields[key].append(value)
        else:
            fields[key] = [fields[key], value]
    return fields


def _describe(exc: ValidationError) -> str:
    errors = exc.errors()
    first = errors[0]
    loc = ".".join(str(part) for part in first["loc"])
    prefix = f"{loc}: " if loc else ""
    count = exc.error_count()
    noun = "error" if count == 1 else "errors"
    return f"{count} validation {noun} for {exc.title}: {prefix}{first['msg']}"


class PydanticSerializer:
    """Default serializer built on pydantic ``TypeAdapter``.

    Decodes ``json`` bodies and ``form`` (urlencoded) bodies. The
    deserialization context is forwarded to pydantic as the validation
    context so model validators can inspect groups or version.
    """

    SUPPORTED_FORMATS = ("json", "form")

    def __init__(
        self, *, formats: Iterable[str] = ("json",), strict: bool | None = None
    ) -> None:
        formats = tuple(formats)
        unknown = [f for f in formats if f not in self.SUPPORTED_FORMATS]
        if unknown:
            raise ConfigurationError(f"Unsupported format: {unknown[0]}")
        self.formats = formats
        self._strict = strict
        self._adapters: dict[Any, TypeAdapter[Any]] = {}

    def _adapter(self, type_: TargetType) -> TypeAdapter[Any]:
        resolved = resolve_type(type_)
        adapter = self._adapters.get(resolved)
        if adapter is None:
            adapter = TypeAdapter(resolved)
            self._adapters[resolved] = adapter
        return adapter

    def deserialize(
        self, data: bytes, type_: TargetType, format: str, context: Any = None
    ) -> Any:
        if format not in self.formats:
            raise UnsupportedFormat(f"Unsupported format: {format}")
        if not data:
            raise SerializerError("Request body is empty")

        adapter = self._adapter(type_)
        validation_context = _validation_context(context)
        logger.debug(f"Deserializing {format} payload into {type_}")

        try:
            if format == "json":
                return adapter.validate_json(
                    data, strict=self._strict, context=validation_context
                )
            try:
                fields = _form_fields(data.decode())
            except UnicodeDecodeError as exc:
                raise SerializerError("Form body is not valid UTF-8") from exc
            return adapter.validate_python(
                fields, strict=self._strict, context=validation_context
            )
        except ValidationError as exc:
            raise SerializerError(_describe(exc)) from exc
