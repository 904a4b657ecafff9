from __future__ import annotations

import logging
from typing import Mapping, Optional

import httpx

from ..config.settings import OsvSettings
from ..core.ports.transport_port import HttpResponse, TransportError

logger = logging.getLogger(__name__)

_JSON_HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}


def _transport_error(method: str, url: str, exc: httpx.HTTPError) -> TransportError:
    return TransportError(f"{method} {url}: {type(exc).__name__}: {exc}")


class HttpClient:
    """Blocking transport over a pooled ``httpx.Client``.

    Returns every final response regardless of status; only failures below
    HTTP raise, as ``TransportError``.
    """

    def __init__(
        self,
        base_headers: Optional[Mapping[str, str]] = None,
        timeout_seconds: float = 30.0,
        max_redirects: int = 10,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._client = httpx.Client(
            timeout=timeout_seconds,
            headers=dict(base_headers or {}),
            follow_redirects=True,
            max_redirects=max_redirects,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: OsvSettings, transport: Optional[httpx.BaseTransport] = None) -> HttpClient:
        return cls(
            base_headers={"User-Agent": settings.user_agent},
            timeout_seconds=settings.timeout_seconds,
            max_redirects=settings.max_redirects,
            transport=transport,
        )

    def get(self, url: str) -> HttpResponse:
        try:
            resp = self._client.get(url, headers={"Accept": "application/json"})
        except httpx.HTTPError as e:
            raise _transport_error("GET", url, e) from e
        logger.debug(f"GET {url} -> {resp.status_code}")
        return HttpResponse(status_code=resp.status_code, content=resp.content, url=str(resp.url))

    def post_json(self, url: str, body: bytes) -> HttpResponse:
        try:
            resp = self._client.post(url, content=body, headers=_JSON_HEADERS)
        except httpx.HTTPError as e:
            raise _transport_error("POST", url, e) from e
        logger.debug(f"POST {url} -> {resp.status_code}")
        return HttpResponse(status_code=resp.status_code, content=resp.content, url=str(resp.url))

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> HttpClient:
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()


class AsyncHttpClient:
    """Same contract as ``HttpClient`` over ``httpx.AsyncClient``."""

    def __init__(
        self,
        base_headers: Optional[Mapping[str, str]] = None,
        timeout_seconds: float = 30.0,
        max_redirects: int = 10,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            timeout=timeout_seconds,
            headers=dict(base_headers or {}),
            follow_redirects=True,
            max_redirects=max_redirects,
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls, settings: OsvSettings, transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> AsyncHttpClient:
        return cls(
            base_headers={"User-Agent": settings.user_agent},
            timeout_seconds=settings.timeout_seconds,
            max_redirects=settings.max_redirects,
            transport=transport,
        )

    async def get(self, url: str) -> HttpResponse:
        try:
            resp = await self._client.get(url, headers={"Accept": "application/json"})
        except httpx.HTTPError as e:
            raise _transport_error("GET", url, e) from e
        logger.debug(f"GET {url} -> {resp.status_code}")
        return HttpResponse(status_code=resp.status_code, content=resp.content, url=str(resp.url))

    async def post_json(self, url: str, body: bytes) -> HttpResponse:
        try:
            resp = await self._client.post(url, content=body, headers=_JSON_HEADERS)
        except httpx.HTTPError as e:
            raise _transport_error("POST", url, e) from e
        logger.debug(f"POST {url} -> {resp.status_code}")
        return HttpResponse(status_code=resp.status_code, content=resp.content, url=str(resp.url))

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> AsyncHttpClient:
        return self

    async def __aexit__(self, exc_type, exc_value, traceback) -> None:
        await self.aclose()
