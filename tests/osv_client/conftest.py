"""tests/osv_client/conftest.py

Common fixtures for the entire test suite.
"""

from __future__ import annotations

import copy
import json
from typing import Any

import httpx
import pytest
import pytest_asyncio

from osv_client.core.client import AsyncOsvClient, OsvClient
from osv_client.infra.http_client import AsyncHttpClient, HttpClient

BASE_URL = "https://api.osv.dev/v1"
QUERY_URL = f"{BASE_URL}/query"

SAMPLE_RECORD: dict[str, Any] = {
    "schema_version": "1.3.0",
    "id": "OSV-2020-484",
    "published": "2020-07-01T00:00:18.401815Z",
    "modified": "2021-03-09T04:49:05.965964Z",
    "summary": "Heap-buffer-overflow in AP4_StdcFileByteStream::ReadPartial",
    "details": (
        "OSS-Fuzz report: https://bugs.chromium.org/p/oss-fuzz/issues/detail?id=20880\n\n"
        "Crash type: Heap-buffer-overflow READ 1\n"
    ),
    "affected": [
        {
            "package": {"name": "bento4", "ecosystem": "OSS-Fuzz", "purl": "pkg:generic/bento4"},
            "ranges": [
                {
                    "type": "GIT",
                    "repo": "https://github.com/axiomatic-systems/Bento4",
                    "events": [
                        {"introduced": "2d6fe6dbfb8e20e7f3a44d4d0d10c2d1a3e8a3c0"},
                        {"fixed": "6ab1d2c6c34e5cf3bbd4a2c49b9a7f3fbe7f5d04"},
                    ],
                }
            ],
            "versions": ["v1.5.1-628"],
            "ecosystem_specific": {"severity": "MEDIUM"},
            "database_specific": {
                "source": "https://github.com/google/oss-fuzz-vulns/blob/main/vulns/bento4/OSV-2020-484.yaml"
            },
        }
    ],
    "references": [
        {"type": "REPORT", "url": "https://bugs.chromium.org/p/oss-fuzz/issues/detail?id=20880"}
    ],
    "severity": [{"type": "CVSS_V3", "score": "CVSS:3.1/AV:N/AC:L/PR:N/UI:N/S:U/C:N/I:N/A:H"}],
    "credits": [{"name": "OSS-Fuzz", "contact": ["https://github.com/google/oss-fuzz"]}],
    "database_specific": {"severity": "MEDIUM"},
}

JINJA2_RECORD: dict[str, Any] = {
    "schema_version": "1.6.0",
    "id": "PYSEC-2014-8",
    "published": "2014-05-19T14:55:00Z",
    "modified": "2021-07-05T00:01:22.043149Z",
    "aliases": ["CVE-2014-1402"],
    "details": "The default configuration for bccache.FileSystemBytecodeCache in Jinja2 before 2.7.2 "
    "does not properly create temporary files.",
    "affected": [
        {
            "package": {"name": "jinja2", "ecosystem": "PyPI", "purl": "pkg:pypi/jinja2"},
            "ranges": [
                {"type": "ECOSYSTEM", "events": [{"introduced": "0"}, {"fixed": "2.7.2"}]},
                {
                    "type": "GIT",
                    "repo": "https://github.com/pallets/jinja",
                    "events": [{"introduced": "0"}, {"fixed": "acb672b6a179567632e032f547582f30fa2f4aa7"}],
                },
            ],
            "versions": ["2.0", "2.4.1", "2.7.1"],
        }
    ],
    "references": [{"type": "WEB", "url": "https://bugzilla.redhat.com/show_bug.cgi?id=1051421"}],
}


class MockOsvService:
    """Registry of canned responses served through an ``httpx.MockTransport``.

    Unregistered requests get a 404, like the real service for unknown ids.
    """

    def __init__(self) -> None:
        self._responses: list[tuple[str, str, Any, int, bytes]] = []
        self.calls: list[httpx.Request] = []
        self.error: Exception | None = None

    def add_response(
        self,
        url: str,
        method: str = "GET",
        status_code: int = 200,
        json_payload: Any = None,
        content: bytes | None = None,
        request_json: Any = None,
    ) -> None:
        """Register a response; ``request_json`` restricts it to one request body."""
        if json_payload is not None:
            body = json.dumps(json_payload).encode("utf-8")
        else:
            body = content if content is not None else b""
        self._responses.append((method.upper(), url, request_json, status_code, body))

    def fail_with(self, exc: Exception) -> None:
        self.error = exc

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        if self.error is not None:
            raise self.error
        url = str(request.url)
        for method, registered_url, request_json, status, body in self._responses:
            if method != request.method or registered_url != url:
                continue
            if request_json is not None and json.loads(request.content) != request_json:
                continue
            return httpx.Response(status, content=body, headers={"Content-Type": "application/json"})
        return httpx.Response(404, text=f"Mock URL not found: {request.method} {request.url}")

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def last_json(self) -> Any:
        return json.loads(self.calls[-1].content)


@pytest.fixture
def osv_service() -> MockOsvService:
    return MockOsvService()


@pytest.fixture
def client(osv_service: MockOsvService):
    with OsvClient(HttpClient(transport=osv_service.transport), base_url=BASE_URL, owns_transport=True) as c:
        yield c


@pytest_asyncio.fixture
async def async_client(osv_service: MockOsvService):
    transport = AsyncHttpClient(transport=osv_service.transport)
    async with AsyncOsvClient(transport, base_url=BASE_URL, owns_transport=True) as c:
        yield c


@pytest.fixture
def sample_record() -> dict[str, Any]:
    return copy.deepcopy(SAMPLE_RECORD)


@pytest.fixture
def jinja2_record() -> dict[str, Any]:
    return copy.deepcopy(JINJA2_RECORD)
