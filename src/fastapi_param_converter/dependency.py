"""converter_dependency() — factory producing FastAPI-compatible dependency callables."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import HTTPException
from loguru import logger
from starlette.requests import Request

from fastapi_param_converter.configuration import BindingConfiguration
from fastapi_param_converter.context import RequestContext
from fastapi_param_converter.exceptions import (
    ConverterAbort,
    ConverterException,
    ConverterInternalError,
)
from fastapi_param_converter.manager import ParamConverterManager
from fastapi_param_converter.openapi import collect_openapi_metadata


def converter_dependency(
    manager: ParamConverterManager,
    *configurations: BindingConfiguration,
) -> Callable[..., Awaitable[RequestContext]]:
    """Return a FastAPI-compatible dependency that runs the bound converters."""
    bound = tuple(configurations)
    metadata = collect_openapi_metadata(manager, bound)

    async def dependency(request: Request) -> RequestContext:
        ctx = RequestContext(request=request, body=await request.body())

        try:
            manager.apply(ctx, bound)
        except ConverterAbort as exc:
            raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
        except ConverterException:
            raise
        except Exception as exc:
            logger.error(f"Unexpected error while converting request: {exc!r}")
            wrapped = ConverterInternalError("Internal converter error", cause=exc)
            raise HTTPException(status_code=500, detail=wrapped.detail) from wrapped

        return ctx

    # Attach metadata for OpenAPI enrichment
    dependency._converter_openapi_metadata = metadata  # type: ignore[attr-defined]
    dependency._converter_configurations = bound  # type: ignore[attr-defined]

    return dependency


def enrich_openapi(app: Any) -> None:
    """Enrich a FastAPI app's OpenAPI schema with converter metadata.

    Call this after all routes are registered to document request bodies
    and error responses contributed by param converters.
    """
    from fastapi import FastAPI
    from fastapi.routing import APIRoute

    if not isinstance(app, FastAPI):
        return

    for route in app.routes:
        if not isinstance(route, APIRoute):
            continue

        metadata = _find_converter_metadata(route)
        if not metadata:
            continue

        # Inject request body, unless the route already declares one
        if "requestBody" in metadata and route.body_field is None:
            route.openapi_extra = route.openapi_extra or {}
            route.openapi_extra.setdefault("requestBody", metadata["requestBody"])

        # Inject responses
        if "responses" in metadata:
            existing = route.responses or {}
            for code, resp in metadata["responses"].items():
                if isinstance(resp, str):
                    existing[int(code)] = {"description": resp}
                else:
                    existing[int(code)] = resp
            route.responses = existing

        # Inject extensions
        for key, value in metadata.items():
            if key.startswith("x-"):
                route.openapi_extra = route.openapi_extra or {}
                route.openapi_extra[key] = value

    # Drop any cached schema so the changes above are picked up
    app.openapi_schema = None


def _find_converter_metadata(route: Any) -> dict[str, Any] | None:
    """Find converter OpenAPI metadata attached to route dependencies."""
    for dep in route.dependant.dependencies:
        call = dep.call
        if hasattr(call, "_converter_openapi_metadata"):
            result: dict[str, Any] = call._converter_openapi_metadata
            return result
    return None
