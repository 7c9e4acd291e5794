"""Built-in param converters."""

from fastapi_param_converter.converters.request_body import RequestBodyParamConverter

__all__ = [
    "RequestBodyParamConverter",
]
