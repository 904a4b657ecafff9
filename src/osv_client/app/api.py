"""Library-level entry points.

``connect()``/``async_connect()`` build a client that owns its own pooled
transport; the module-level ``query*``/``vulnerability`` helpers open one for
the duration of a single call.

Example:
    import osv_client
    from osv_client import Ecosystem

    vulns = osv_client.query_package("jinja2", "2.4.1", Ecosystem.PYPI)

    with osv_client.connect(timeout_seconds=10) as client:
        record = client.vulnerability("OSV-2020-484")
"""

from __future__ import annotations

from typing import Any, Optional

from ..config.settings import OsvSettings
from ..core.client import AsyncOsvClient, OsvClient
from ..core.domain.enums import Ecosystem
from ..core.domain.models import Request, Vulnerability
from ..infra.http_client import AsyncHttpClient, HttpClient


def _settings(settings: OsvSettings | None, overrides: dict[str, Any]) -> OsvSettings:
    if settings is None:
        return OsvSettings(**overrides)
    if overrides:
        return OsvSettings(**{**settings.model_dump(), **overrides})
    return settings


def connect(settings: OsvSettings | None = None, **overrides: Any) -> OsvClient:
    """Return a blocking client with its own connection pool.

    Args:
        settings: Explicit settings. If None, loaded from OSV_CLIENT_* environment variables.
        **overrides: Individual settings to override (base_url, timeout_seconds, ...).
    """
    resolved = _settings(settings, overrides)
    return OsvClient(HttpClient.from_settings(resolved), base_url=resolved.base_url, owns_transport=True)


def async_connect(settings: OsvSettings | None = None, **overrides: Any) -> AsyncOsvClient:
    resolved = _settings(settings, overrides)
    return AsyncOsvClient(
        AsyncHttpClient.from_settings(resolved), base_url=resolved.base_url, owns_transport=True
    )


def query(request: Request) -> Optional[list[Vulnerability]]:
    with connect() as client:
        return client.query(request)


def query_package(name: str, version: str, ecosystem: Ecosystem | str) -> Optional[list[Vulnerability]]:
    with connect() as client:
        return client.query_package(name, version, ecosystem)


def query_commit(commit: str) -> Optional[list[Vulnerability]]:
    with connect() as client:
        return client.query_commit(commit)


def vulnerability(vuln_id: str) -> Vulnerability:
    with connect() as client:
        return client.vulnerability(vuln_id)
