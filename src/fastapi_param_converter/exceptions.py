"""Exception hierarchy for param converters and their collaborators."""

from __future__ import annotations


class ConverterException(Exception):
    """Base for all converter exceptions."""


class ConverterAbort(ConverterException):
    """Controlled abort with HTTP status code and detail."""

    def __init__(self, detail: str, *, status_code: int = 400) -> None:
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail


class BadRequest(ConverterAbort):
    """Request body could not be converted (400)."""

    def __init__(self, detail: str = "Bad request") -> None:
        super().__init__(detail, status_code=400)


class ConfigurationError(ConverterException, ValueError):
    """Converter or manager was set up incorrectly."""


class ConverterInternalError(ConverterException):
    """Engine-level error wrapping unexpected exceptions."""

    def __init__(self, detail: str, *, cause: Exception | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.cause = cause


class SerializerError(Exception):
    """Raised by serializers when a payload cannot be deserialized."""


class UnsupportedFormat(SerializerError):
    """Serializer has no decoder for the requested format."""
