"""OpenAPI schema enrichment — collects metadata from param converters."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from fastapi_param_converter.configuration import BindingConfiguration
from fastapi_param_converter.manager import ParamConverterManager


def collect_openapi_metadata(
    manager: ParamConverterManager,
    configurations: Iterable[BindingConfiguration],
) -> dict[str, Any]:
    """Collect and merge OpenAPI metadata from the converters bound to a route."""
    request_body: dict[str, Any] | None = None
    responses: dict[str, Any] = {}
    extensions: dict[str, list[Any]] = {}

    for config in configurations:
        converter = manager.find(config)
        if converter is None:
            continue
        spec = converter.openapi_spec(config)
        if spec is None:
            continue

        # Only one body per operation; the first converter to describe it wins
        if "requestBody" in spec and request_body is None:
            request_body = spec["requestBody"]
        if "responses" in spec:
            responses.update(spec["responses"])

        for key, value in spec.items():
            if key.startswith("x-") and isinstance(value, list):
                extensions.setdefault(key, []).extend(value)

    result: dict[str, Any] = {}
    if request_body:
        result["requestBody"] = request_body
    if responses:
        result["responses"] = responses
    if extensions:
        result.update(extensions)

    return result
