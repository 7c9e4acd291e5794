"""Request body converter — deserializes and optionally validates the body."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, fields, replace
from typing import Any

from loguru import logger

from fastapi_param_converter.configuration import BindingConfiguration
from fastapi_param_converter.context import RequestContext
from fastapi_param_converter.converter import ParamConverter
from fastapi_param_converter.exceptions import BadRequest, ConfigurationError
from fastapi_param_converter.serializer import DeserializationContext, Serializer
from fastapi_param_converter.validation import ConstraintViolationList, Validator

DEFAULT_FORMAT = "json"

FORMATS: dict[str, str] = {
    "application/json": "json",
    "application/x-json": "json",
    "application/xml": "xml",
    "text/xml": "xml",
    "application/x-xml": "xml",
    "text/html": "html",
    "application/xhtml+xml": "html",
    "text/plain": "txt",
    "application/x-www-form-urlencoded": "form",
    "text/csv": "csv",
    "application/x-yaml": "yaml",
    "application/yaml": "yaml",
    "text/yaml": "yaml",
}

MEDIA_TYPES: dict[str, str] = {
    "json": "application/json",
    "xml": "application/xml",
    "form": "application/x-www-form-urlencoded",
    "yaml": "application/yaml",
    "csv": "text/csv",
}

_CONTEXT_KEYS = frozenset({"groups", "version"})


def resolve_format(content_type: str | None) -> str:
    """Map a Content-Type header to a serializer format name.

    A missing header means JSON. Unknown media types are returned as-is so
    the serializer can decide whether to reject them.
    """
    if not content_type:
        return DEFAULT_FORMAT
    media_type = content_type.split(";", 1)[0].strip().lower()
    if not media_type:
        return DEFAULT_FORMAT
    if media_type in FORMATS:
        return FORMATS[media_type]
    if media_type.endswith("+json"):
        return "json"
    if media_type.endswith("+xml"):
        return "xml"
    return media_type


@dataclass(frozen=True)
class ValidatorOptions:
    """Arguments forwarded to ``Validator.validate``."""

    groups: Sequence[str] | None = None
    traverse: bool = False
    deep: bool = False

    def as_dict(self) -> dict[str, Any]:
        return {"groups": self.groups, "traverse": self.traverse, "deep": self.deep}


DEFAULT_VALIDATOR_OPTIONS = ValidatorOptions()


def resolve_validator_options(
    options: Mapping[str, Any],
    defaults: ValidatorOptions = DEFAULT_VALIDATOR_OPTIONS,
) -> ValidatorOptions:
    """Merge the ``validator`` entry of binding options over ``defaults``.

    Only known keys are taken; anything the user leaves out keeps its
    default value.
    """
    user = options.get("validator")
    if not isinstance(user, Mapping):
        return defaults
    known = {f.name for f in fields(ValidatorOptions)}
    overrides = {key: value for key, value in user.items() if key in known}
    groups = overrides.get("groups")
    if groups is not None:
        overrides["groups"] = [groups] if isinstance(groups, str) else list(groups)
    return replace(defaults, **overrides)


class RequestBodyParamConverter(ParamConverter):
    """Deserializes the request body into ``config.target``.

    The result is stored in ``ctx.state[config.name]``. When a validator is
    configured, the violation list is stored under
    ``validation_errors_argument`` as well; violations never abort the
    request.
    """

    def __init__(
        self,
        serializer: Serializer,
        groups: Sequence[str] | None = None,
        version: str | None = None,
        validator: Validator | None = None,
        validation_errors_argument: str | None = None,
    ) -> None:
        if validator is not None and not validation_errors_argument:
            raise ConfigurationError(
                '"validation_errors_argument" is required when a validator is set'
            )
        self._serializer = serializer
        self._groups: tuple[str, ...] = tuple(groups) if groups else ()
        self._version = version
        self._validator = validator
        self._validation_errors_argument = validation_errors_argument

    def supports(self, config: BindingConfiguration) -> bool:
        return bool(config.target)

    def apply(self, ctx: RequestContext, config: BindingConfiguration) -> None:
        if config.is_optional and not ctx.body:
            ctx.state[config.name] = None  # type: ignore[index]
            return

        options = config.options
        fmt = resolve_format(ctx.content_type)
        context = self._build_context(options)
        logger.debug(
            f"Converting request body ({fmt}) into {config.target_name} "
            f"as {config.name!r}"
        )

        try:
            if context is None:
                value = self._serializer.deserialize(ctx.body, config.target, fmt)
            else:
                value = self._serializer.deserialize(
                    ctx.body, config.target, fmt, context
                )
        except ConfigurationError:
            raise
        except Exception as exc:
            logger.warning(f"Rejecting request body for {config.name!r}: {exc}")
            raise BadRequest(str(exc)) from exc

        violations: ConstraintViolationList | None = None
        if self._validator is not None:
            validator_options = self._get_validator_options(options)
            violations = self._validator.validate(
                value,
                validator_options.groups,
                validator_options.traverse,
                validator_options.deep,
            )

        ctx.state[config.name] = value  # type: ignore[index]
        if violations is not None:
            ctx.state[self._validation_errors_argument] = violations  # type: ignore[index]

    def _build_context(
        self, options: Mapping[str, Any]
    ) -> DeserializationContext | dict[str, Any] | None:
        overlay = options.get("deserializationContext")
        if isinstance(overlay, DeserializationContext):
            version = overlay.version if overlay.version is not None else self._version
            return DeserializationContext(
                groups=overlay.groups or self._groups,
                version=version,
                attributes=dict(overlay.attributes),
            )
        if overlay is not None and not isinstance(overlay, Mapping):
            raise ConfigurationError(
                '"deserializationContext" must be a mapping or a DeserializationContext, '
                f"got {type(overlay).__name__}"
            )

        has_defaults = bool(self._groups) or self._version is not None
        if overlay is None and not has_defaults:
            return None
        if (
            overlay is not None
            and not has_defaults
            and not any(key in overlay for key in _CONTEXT_KEYS)
        ):
            # Serializer-specific options, handed over untouched
            return dict(overlay)

        overlay = overlay or {}
        groups = overlay.get("groups", self._groups)
        if isinstance(groups, str):
            groups = (groups,)
        return DeserializationContext(
            groups=tuple(groups or ()),
            version=overlay.get("version", self._version),
            attributes={k: v for k, v in overlay.items() if k not in _CONTEXT_KEYS},
        )

    def _get_validator_options(self, options: Mapping[str, Any]) -> ValidatorOptions:
        return resolve_validator_options(options)

    def openapi_spec(self, config: BindingConfiguration) -> dict[str, Any] | None:
        formats = getattr(self._serializer, "formats", (DEFAULT_FORMAT,))
        content = {
            MEDIA_TYPES[fmt]: {"schema": {"type": "object"}}
            for fmt in formats
            if fmt in MEDIA_TYPES
        }
        return {
            "requestBody": {"required": not config.is_optional, "content": content},
            "responses": {"400": {"description": "Invalid request body"}},
        }
