"""Request encoding, response discrimination and status mapping for the OSV API.

``POST /v1/query`` answers with a 2xx status both when vulnerabilities match
and when none do. Only the body tells the cases apart:

    {"vulns": [ ...records... ]}   -> matches (the list is surfaced as-is, even if empty)
    {}, [], null, ...              -> no result (any other well-formed JSON)
    invalid JSON, empty body       -> SerializationError

The body is decoded as an ordered alternative: the "vulnerabilities" shape is
tried first, the "no result" shape second. An object that carries a `vulns`
key which fails to decode is a SchemaError, never a silent "no result".

A 404 means the queried identity itself is unknown and short-circuits before
any decoding happens.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from .domain.errors import NotFoundError, RequestFailedError, SerializationError, UnexpectedError
from .domain.models import CommitQuery, PackageQuery, Request, Vulnerability, as_serialization_error
from .ports.transport_port import HttpResponse

logger = logging.getLogger(__name__)

NOT_FOUND = 404


class VulnerabilitiesResponse(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    vulns: list[Vulnerability]


# "no result" alternative: any well-formed JSON value
_ANY_JSON = TypeAdapter(Any)


def encode_request(request: Request) -> bytes:
    if not isinstance(request, (CommitQuery, PackageQuery)):
        raise SerializationError(f"unsupported request type {type(request).__name__}")
    try:
        return request.model_dump_json(by_alias=True).encode("utf-8")
    except PydanticSerializationError as e:
        raise SerializationError(str(e)) from e


def check_status(status_code: int, identifier: str) -> None:
    """Raise the error a non-2xx status maps to; return quietly on success."""
    if status_code == NOT_FOUND:
        raise NotFoundError(identifier)
    if 200 <= status_code < 300:
        return
    if 400 <= status_code < 600:
        raise RequestFailedError(f"HTTP {status_code} for {identifier}", status_code=status_code)
    raise UnexpectedError(f"HTTP {status_code} for {identifier}")


def decode_query_body(content: bytes) -> list[Vulnerability] | None:
    try:
        return list(VulnerabilitiesResponse.model_validate_json(content).vulns)
    except ValidationError as first:
        try:
            body = _ANY_JSON.validate_json(content)
        except ValidationError as e:
            raise as_serialization_error(e, "query response") from e
        if isinstance(body, dict) and "vulns" in body:
            raise as_serialization_error(first, "query response") from first
        return None


def decode_vulnerability_body(content: bytes) -> Vulnerability:
    return Vulnerability.from_json(content)


def interpret_query_response(request: Request, response: HttpResponse) -> list[Vulnerability] | None:
    check_status(response.status_code, request.subject)
    vulns = decode_query_body(response.content)
    if vulns is None:
        logger.debug(f"No vulnerabilities for {request.subject}")
    else:
        logger.debug(f"{len(vulns)} vulnerabilities for {request.subject}")
    return vulns


def interpret_vulnerability_response(vuln_id: str, response: HttpResponse) -> Vulnerability:
    check_status(response.status_code, vuln_id)
    return decode_vulnerability_body(response.content)
