from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class HttpResponse:
    status_code: int
    content: bytes
    url: str = ""


class TransportError(Exception):
    """Failure below the HTTP layer: connection, TLS, timeout, redirect loop."""


class TransportPort(Protocol):
    def get(self, url: str) -> HttpResponse:
        """Issue a GET and return the final response, whatever its status."""
        ...

    def post_json(self, url: str, body: bytes) -> HttpResponse:
        """POST an already-encoded JSON body and return the final response."""
        ...

    def close(self) -> None:
        ...


class AsyncTransportPort(Protocol):
    async def get(self, url: str) -> HttpResponse:
        ...

    async def post_json(self, url: str, body: bytes) -> HttpResponse:
        ...

    async def aclose(self) -> None:
        ...
