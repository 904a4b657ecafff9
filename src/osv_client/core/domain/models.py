"""OSV schema model (https://ossf.github.io/osv-schema/).

Shape of a single record as returned by ``GET /v1/vulns/{id}`` (abridged):

{
  "schema_version": "1.3.0",
  "id": "OSV-2020-484",
  "published": "2020-07-01T00:00:18.401815Z",
  "modified": "2021-03-09T04:49:05.965964Z",
  "summary": "Heap-buffer-overflow in ...",
  "affected": [
    {
      "package": {"name": "poppler", "ecosystem": "OSS-Fuzz"},
      "ranges": [
        {
          "type": "GIT",
          "repo": "https://anongit.freedesktop.org/git/poppler/poppler.git",
          "events": [{"introduced": "e4badf4d..."}, {"fixed": "155f73bd..."}]
        }
      ],
      "versions": ["poppler-0.80.0"]
    }
  ],
  "references": [{"type": "REPORT", "url": "https://bugs.chromium.org/..."}]
}

Optional fields that are absent stay absent when a model is dumped again:
``OsvModel`` drops every ``None``-valued optional field instead of emitting
``null``. Unknown keys are ignored at every level.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Any, Optional, Union

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    PlainValidator,
    SerializerFunctionWrapHandler,
    ValidationError,
    model_serializer,
    model_validator,
)

from typing_extensions import Self

from .enums import Ecosystem, EventKind, RangeType, ReferenceType, SeverityType
from .errors import SchemaError, SerializationError


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _format_utc(value: datetime) -> str:
    return value.isoformat().replace("+00:00", "Z")


# RFC 3339 in UTC, ending in "Z"
UtcDatetime = Annotated[
    datetime,
    AfterValidator(_as_utc),
    PlainSerializer(_format_utc, return_type=str, when_used="json"),
]

EcosystemTag = Annotated[
    Ecosystem,
    PlainValidator(Ecosystem.parse),
    PlainSerializer(lambda e: e.value, return_type=str, when_used="json"),
]


def as_serialization_error(exc: ValidationError, what: str) -> SerializationError:
    """Translate a pydantic validation failure into the client's error taxonomy."""
    errors = exc.errors(include_url=False)
    if any(e["type"] == "json_invalid" for e in errors):
        return SerializationError(f"{what} is not valid JSON: {errors[0]['msg']}")
    first = errors[0]
    loc = ".".join(str(p) for p in first["loc"]) or "<root>"
    return SchemaError(
        f"{what} does not match the OSV schema at {loc}: {first['msg']} "
        f"({exc.error_count()} error(s))"
    )


class OsvModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    @model_serializer(mode="wrap")
    def _omit_absent(self, handler: SerializerFunctionWrapHandler) -> Any:
        data = handler(self)
        if not isinstance(data, dict):
            return data
        for name, info in type(self).model_fields.items():
            if info.is_required() or getattr(self, name) is not None:
                continue
            data.pop(name, None)
            if info.alias:
                data.pop(info.alias, None)
        return data

    @classmethod
    def from_json(cls, data: str | bytes) -> Self:
        try:
            return cls.model_validate_json(data)
        except ValidationError as e:
            raise as_serialization_error(e, cls.__name__) from e

    @classmethod
    def from_dict(cls, data: Any) -> Self:
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise as_serialization_error(e, cls.__name__) from e

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self, *, indent: int | None = None) -> str:
        return self.model_dump_json(by_alias=True, indent=indent)


class Package(OsvModel):
    """The library or command a vulnerability applies to."""

    name: str
    ecosystem: EcosystemTag
    # Package URL, https://github.com/package-url/purl-spec
    purl: Optional[str] = None


_EVENT_KEYS = frozenset(k.value for k in EventKind)


class Event(BaseModel):
    """One point on a range's timeline.

    On the wire an event is a single-key object named after its kind:
    ``{"introduced": "0"}``, ``{"fixed": "1.2.3"}``, ``{"limit": "<sha>"}``.
    """

    model_config = ConfigDict(frozen=True)

    kind: EventKind
    value: str

    @model_validator(mode="before")
    @classmethod
    def _from_wire(cls, data: Any) -> Any:
        if not isinstance(data, dict) or ("kind" in data and "value" in data):
            return data
        keys = [k for k in data if k in _EVENT_KEYS]
        if len(keys) != 1:
            raise ValueError(
                f"event must carry exactly one of {sorted(_EVENT_KEYS)}, got {sorted(data)}"
            )
        return {"kind": EventKind(keys[0]), "value": data[keys[0]]}

    @model_serializer
    def _to_wire(self) -> dict[str, str]:
        return {self.kind.value: self.value}

    @classmethod
    def introduced(cls, value: str) -> "Event":
        return cls(kind=EventKind.INTRODUCED, value=value)

    @classmethod
    def fixed(cls, value: str) -> "Event":
        return cls(kind=EventKind.FIXED, value=value)

    @classmethod
    def last_affected(cls, value: str) -> "Event":
        return cls(kind=EventKind.LAST_AFFECTED, value=value)

    @classmethod
    def limit(cls, value: str) -> "Event":
        return cls(kind=EventKind.LIMIT, value=value)


class Range(OsvModel):
    range_type: RangeType = Field(alias="type")
    # directly usable as an argument to the VCS clone command
    repo: Optional[str] = None
    events: list[Event]


class Affected(OsvModel):
    """A package together with the versions or commits a vulnerability affects."""

    package: Package
    ranges: list[Range] = Field(default_factory=list)
    versions: Optional[list[str]] = None
    ecosystem_specific: Optional[Any] = None
    database_specific: Optional[Any] = None


class Reference(OsvModel):
    reference_type: ReferenceType = Field(alias="type")
    url: str


class Severity(OsvModel):
    severity_type: SeverityType = Field(alias="type")
    # e.g. "CVSS:3.1/AV:N/AC:H/PR:N/UI:N/S:C/C:H/I:N/A:N"
    score: str


class Credit(OsvModel):
    name: str
    contact: Optional[list[str]] = None


class Vulnerability(OsvModel):
    """A vulnerability record in the OSV exchange format.

    ``id`` has the form ``<DB>-<ENTRYID>`` (``OSV-2020-111``, ``CVE-2021-3114``,
    ``GHSA-vp9c-fpxx-744v``). A missing ``withdrawn`` means the entry is live.
    """

    schema_version: str
    id: str
    published: UtcDatetime
    modified: UtcDatetime
    withdrawn: Optional[UtcDatetime] = None
    aliases: Optional[list[str]] = None
    related: Optional[list[str]] = None
    summary: Optional[str] = None
    details: Optional[str] = None
    affected: list[Affected]
    references: Optional[list[Reference]] = None
    severity: Optional[list[Severity]] = None
    credits: Optional[list[Credit]] = None
    database_specific: Optional[Any] = None

    @property
    def is_withdrawn(self) -> bool:
        return self.withdrawn is not None


class CommitQuery(OsvModel):
    """Query by full SHA1 git commit hash: ``{"commit": "<sha>"}``."""

    commit: str

    @property
    def subject(self) -> str:
        return f"commit - `{self.commit}`"


class PackageQuery(OsvModel):
    """Query by package and version: ``{"version": "...", "package": {...}}``."""

    version: str
    package: Package

    @property
    def subject(self) -> str:
        return f"package - `{self.package.name}`"


# Untagged on the wire: the variant is told apart by which fields are present.
Request = Union[CommitQuery, PackageQuery]
