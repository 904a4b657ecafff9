from __future__ import annotations

import json

import pytest

from osv_client.core import protocol
from osv_client.core.domain.enums import Ecosystem
from osv_client.core.domain.errors import (
    NotFoundError,
    RequestFailedError,
    SchemaError,
    SerializationError,
    UnexpectedError,
)
from osv_client.core.domain.models import CommitQuery, Package, PackageQuery
from osv_client.core.ports.transport_port import HttpResponse


def _body(obj: object) -> bytes:
    return json.dumps(obj).encode("utf-8")


def test_vulns_body_decodes_to_list(sample_record):
    vulns = protocol.decode_query_body(_body({"vulns": [sample_record]}))
    assert vulns is not None
    assert [v.id for v in vulns] == ["OSV-2020-484"]


def test_empty_object_decodes_to_none():
    assert protocol.decode_query_body(b"{}") is None


def test_empty_vulns_array_is_surfaced_as_empty_list():
    vulns = protocol.decode_query_body(_body({"vulns": []}))
    assert vulns == []


def test_opaque_object_without_vulns_is_no_result():
    assert protocol.decode_query_body(_body({"next_page_token": "abc"})) is None


def test_vulns_key_with_invalid_records_is_schema_error(sample_record):
    del sample_record["id"]
    with pytest.raises(SchemaError) as ei:
        protocol.decode_query_body(_body({"vulns": [sample_record]}))
    assert "vulns" in str(ei.value)


def test_vulns_key_with_non_list_value_is_schema_error():
    with pytest.raises(SchemaError):
        protocol.decode_query_body(_body({"vulns": "none"}))


@pytest.mark.parametrize("content", [b"[]", b"null", b'"text"', b"0"])
def test_non_object_json_is_no_result(content):
    assert protocol.decode_query_body(content) is None


@pytest.mark.parametrize("content", [b"", b"not json", b"{\"vulns\": "])
def test_invalid_json_is_serialization_error(content):
    with pytest.raises(SerializationError) as ei:
        protocol.decode_query_body(content)
    assert not isinstance(ei.value, SchemaError)


def test_encode_commit_query_is_untagged():
    assert protocol.encode_request(CommitQuery(commit="6879efc2")) == b'{"commit":"6879efc2"}'


def test_encode_package_query_is_untagged_and_omits_absent_purl():
    req = PackageQuery(version="2.4.1", package=Package(name="jinja2", ecosystem=Ecosystem.PYPI))
    assert json.loads(protocol.encode_request(req)) == {
        "version": "2.4.1",
        "package": {"name": "jinja2", "ecosystem": "PyPI"},
    }


def test_encode_package_query_keeps_purl_when_given():
    req = PackageQuery(
        version="4.17.15",
        package=Package(name="lodash", ecosystem="npm", purl="pkg:npm/lodash"),
    )
    assert json.loads(protocol.encode_request(req))["package"]["purl"] == "pkg:npm/lodash"


def test_encode_rejects_unknown_request_type():
    with pytest.raises(SerializationError):
        protocol.encode_request({"commit": "abc"})  # type: ignore[arg-type]


def test_request_subjects():
    assert CommitQuery(commit="abc").subject == "commit - `abc`"
    req = PackageQuery(version="1.0.0-noise", package=Package(name="jinja2", ecosystem="PyPI"))
    assert req.subject == "package - `jinja2`"


@pytest.mark.parametrize("status", [200, 201, 204, 299])
def test_check_status_accepts_success(status):
    protocol.check_status(status, "x")


def test_check_status_not_found():
    with pytest.raises(NotFoundError) as ei:
        protocol.check_status(404, "OSV-1")
    assert ei.value.identifier == "OSV-1"
    assert str(ei.value) == "requested resource OSV-1 not found"


@pytest.mark.parametrize("status", [400, 429, 500, 503])
def test_check_status_other_failures_are_request_failed(status):
    with pytest.raises(RequestFailedError) as ei:
        protocol.check_status(status, "x")
    assert ei.value.status_code == status


@pytest.mark.parametrize("status", [100, 302, 304])
def test_check_status_non_final_is_unexpected(status):
    with pytest.raises(UnexpectedError):
        protocol.check_status(status, "x")


def test_not_found_short_circuits_before_decoding():
    req = CommitQuery(commit="zzzz")
    with pytest.raises(NotFoundError) as ei:
        protocol.interpret_query_response(req, HttpResponse(status_code=404, content=b"<html>"))
    assert ei.value.identifier == "commit - `zzzz`"


def test_error_status_with_empty_object_is_not_no_result():
    req = CommitQuery(commit="abc")
    with pytest.raises(RequestFailedError):
        protocol.interpret_query_response(req, HttpResponse(status_code=500, content=b"{}"))


def test_interpret_vulnerability_response(sample_record):
    vuln = protocol.interpret_vulnerability_response(
        "OSV-2020-484", HttpResponse(status_code=200, content=_body(sample_record))
    )
    assert vuln.id == "OSV-2020-484"
