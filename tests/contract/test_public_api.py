"""Contract tests — verify all public symbols are importable from top-level."""

from __future__ import annotations

import fastapi_param_converter

PUBLIC_SYMBOLS = [
    # Core
    "BindingConfiguration",
    "RequestContext",
    "ParamConverter",
    "ParamConverterManager",
    "RequestBodyParamConverter",
    "ValidatorOptions",
    "resolve_format",
    "resolve_validator_options",
    "converter_dependency",
    "enrich_openapi",
    # Collaborators
    "Serializer",
    "DeserializationContext",
    "PydanticSerializer",
    "Validator",
    "Constraint",
    "ConstraintValidator",
    "ConstraintViolation",
    "ConstraintViolationList",
    # Exceptions
    "ConverterException",
    "ConverterAbort",
    "BadRequest",
    "ConfigurationError",
    "ConverterInternalError",
    "SerializerError",
    "UnsupportedFormat",
]


class TestPublicAPIContract:
    def test_all_symbols_importable(self) -> None:
        for symbol in PUBLIC_SYMBOLS:
            assert hasattr(fastapi_param_converter, symbol), (
                f"Symbol '{symbol}' not found in fastapi_param_converter"
            )

    def test_all_symbols_in_all(self) -> None:
        for symbol in PUBLIC_SYMBOLS:
            assert symbol in fastapi_param_converter.__all__, (
                f"Symbol '{symbol}' not in __all__"
            )

    def test_no_extra_symbols_in_all(self) -> None:
        assert sorted(fastapi_param_converter.__all__) == sorted(PUBLIC_SYMBOLS)
