"""OSV (Open Source Vulnerability) query facade.

Every operation issues exactly one request through the injected transport and
returns the decoded result or raises an ``ApiError``. Nothing is cached,
retried or paginated, and no state is shared between calls, so one client may
be used from several threads (``OsvClient``) or tasks (``AsyncOsvClient``) at once.

Endpoints
---------
1) POST /v1/query
   - {"commit": "<sha1>"} or {"version": "2.4.1", "package": {"name": "jinja2", "ecosystem": "PyPI"}}
   - answers {"vulns": [...]} when something matches and {} when nothing does.

2) GET /v1/vulns/{id}
   - answers a single OSV record; 404 for unknown ids.
"""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import ValidationError

from ..config.urls import DEFAULT_BASE_URL, get_osv_query_url, get_osv_vuln_url
from . import protocol
from .domain.enums import Ecosystem
from .domain.errors import RequestFailedError
from .domain.models import CommitQuery, Package, PackageQuery, Request, Vulnerability, as_serialization_error
from .ports.transport_port import AsyncTransportPort, TransportError, TransportPort

logger = logging.getLogger(__name__)


def package_request(name: str, version: str, ecosystem: Ecosystem | str) -> PackageQuery:
    try:
        return PackageQuery(version=version, package=Package(name=name, ecosystem=ecosystem, purl=None))
    except ValidationError as e:
        raise as_serialization_error(e, "package query") from e


def commit_request(commit: str) -> CommitQuery:
    try:
        return CommitQuery(commit=commit)
    except ValidationError as e:
        raise as_serialization_error(e, "commit query") from e


class OsvClient:
    """Blocking OSV API client.

    Example:
        with connect() as client:
            vulns = client.query_package("jinja2", "2.4.1", Ecosystem.PYPI)
            if vulns is None:
                print("no known vulnerabilities")

    The client closes the transport on ``close()`` only when ``owns_transport``
    is set; a caller-supplied transport stays the caller's to close.
    """

    def __init__(
        self,
        transport: TransportPort,
        *,
        base_url: str = DEFAULT_BASE_URL,
        owns_transport: bool = False,
    ) -> None:
        self._http = transport
        self._base_url = base_url
        self._owns_transport = owns_transport

    @property
    def base_url(self) -> str:
        return self._base_url

    def query(self, request: Request) -> Optional[list[Vulnerability]]:
        """Ask the service which vulnerabilities affect a package version or a commit.

        Returns:
            The ``vulns`` list when the body carries one (possibly empty), or None
            when the service reports no result.

        Raises:
            NotFoundError: the service does not know the package or commit.
            SerializationError: the request could not be encoded or the body decoded.
            RequestFailedError: transport failure or an unhandled error status.
        """
        body = protocol.encode_request(request)
        url = get_osv_query_url(self._base_url)
        logger.debug(f"Querying OSV for {request.subject}")
        try:
            response = self._http.post_json(url, body)
        except TransportError as e:
            raise RequestFailedError(str(e)) from e
        return protocol.interpret_query_response(request, response)

    def query_package(self, name: str, version: str, ecosystem: Ecosystem | str) -> Optional[list[Vulnerability]]:
        return self.query(package_request(name, version, ecosystem))

    def query_commit(self, commit: str) -> Optional[list[Vulnerability]]:
        return self.query(commit_request(commit))

    def vulnerability(self, vuln_id: str) -> Vulnerability:
        """Fetch one record by id (e.g. "OSV-2020-484", "GHSA-vp9c-fpxx-744v").

        Raises:
            NotFoundError: unknown id.
            InvalidUrlError: the id cannot be composed into a request URL.
        """
        url = get_osv_vuln_url(vuln_id, self._base_url)
        logger.debug(f"Fetching OSV record {vuln_id}")
        try:
            response = self._http.get(url)
        except TransportError as e:
            raise RequestFailedError(str(e)) from e
        return protocol.interpret_vulnerability_response(vuln_id, response)

    def close(self) -> None:
        if self._owns_transport:
            self._http.close()

    def __enter__(self) -> OsvClient:
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()


class AsyncOsvClient:
    """Coroutine flavour of ``OsvClient``.

    Each call suspends only while awaiting the transport. Cancellation is left
    to the caller, e.g. ``await asyncio.wait_for(client.query_commit(sha), 10)``.
    """

    def __init__(
        self,
        transport: AsyncTransportPort,
        *,
        base_url: str = DEFAULT_BASE_URL,
        owns_transport: bool = False,
    ) -> None:
        self._http = transport
        self._base_url = base_url
        self._owns_transport = owns_transport

    @property
    def base_url(self) -> str:
        return self._base_url

    async def query(self, request: Request) -> Optional[list[Vulnerability]]:
        body = protocol.encode_request(request)
        url = get_osv_query_url(self._base_url)
        logger.debug(f"Querying OSV for {request.subject}")
        try:
            response = await self._http.post_json(url, body)
        except TransportError as e:
            raise RequestFailedError(str(e)) from e
        return protocol.interpret_query_response(request, response)

    async def query_package(
        self, name: str, version: str, ecosystem: Ecosystem | str
    ) -> Optional[list[Vulnerability]]:
        return await self.query(package_request(name, version, ecosystem))

    async def query_commit(self, commit: str) -> Optional[list[Vulnerability]]:
        return await self.query(commit_request(commit))

    async def vulnerability(self, vuln_id: str) -> Vulnerability:
        url = get_osv_vuln_url(vuln_id, self._base_url)
        logger.debug(f"Fetching OSV record {vuln_id}")
        try:
            response = await self._http.get(url)
        except TransportError as e:
            raise RequestFailedError(str(e)) from e
        return protocol.interpret_vulnerability_response(vuln_id, response)

    async def aclose(self) -> None:
        if self._owns_transport:
            await self._http.aclose()

    async def __aenter__(self) -> AsyncOsvClient:
        return self

    async def __aexit__(self, exc_type, exc_value, traceback) -> None:
        await self.aclose()
