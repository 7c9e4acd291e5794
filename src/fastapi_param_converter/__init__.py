"""FastAPI Param Converter - typed request body binding for FastAPI."""

from fastapi_param_converter.configuration import BindingConfiguration
from fastapi_param_converter.context import RequestContext
from fastapi_param_converter.converter import ParamConverter
from fastapi_param_converter.converters.request_body import (
    RequestBodyParamConverter,
    ValidatorOptions,
    resolve_format,
    resolve_validator_options,
)
from fastapi_param_converter.dependency import converter_dependency, enrich_openapi
from fastapi_param_converter.exceptions import (
    BadRequest,
    ConfigurationError,
    ConverterAbort,
    ConverterException,
    ConverterInternalError,
    SerializerError,
    UnsupportedFormat,
)
from fastapi_param_converter.manager import ParamConverterManager
from fastapi_param_converter.serializer import (
    DeserializationContext,
    PydanticSerializer,
    Serializer,
)
from fastapi_param_converter.validation import (
    Constraint,
    ConstraintValidator,
    ConstraintViolation,
    ConstraintViolationList,
    Validator,
)

__all__ = [
    "BadRequest",
    "BindingConfiguration",
    "ConfigurationError",
    "Constraint",
    "ConstraintValidator",
    "ConstraintViolation",
    "ConstraintViolationList",
    "ConverterAbort",
    "ConverterException",
    "ConverterInternalError",
    "DeserializationContext",
    "ParamConverter",
    "ParamConverterManager",
    "PydanticSerializer",
    "RequestBodyParamConverter",
    "RequestContext",
    "Serializer",
    "SerializerError",
    "UnsupportedFormat",
    "Validator",
    "ValidatorOptions",
    "converter_dependency",
    "enrich_openapi",
    "resolve_format",
    "resolve_validator_options",
]
