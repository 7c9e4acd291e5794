"""RequestContext — per-request attribute bag."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from starlette.requests import Request


@dataclass
class RequestContext:
    """Per-request state container written to by param converters.

    ``body`` holds the raw request body, read once before any converter runs.
    ``state`` is the attribute bag endpoints read converted values from.
    """

    request: Request
    body: bytes = b""
    state: dict[str, Any] = field(default_factory=dict)

    @property
    def content_type(self) -> str | None:
        return self.request.headers.get("content-type")
