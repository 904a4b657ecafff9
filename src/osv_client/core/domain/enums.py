from __future__ import annotations

from enum import Enum
from typing import Any


class Ecosystem(str, Enum):
    """Package ecosystems known to the OSV database.

    The set is open: values the service adds later decode into pseudo-members
    that carry the raw string, so records for new ecosystems never fail to parse
    and re-serialize unchanged.
    """

    GO = "Go"
    NPM = "npm"
    OSS_FUZZ = "OSS-Fuzz"
    PYPI = "PyPI"
    RUBYGEMS = "RubyGems"
    CRATES_IO = "crates.io"
    PACKAGIST = "Packagist"
    MAVEN = "Maven"
    NUGET = "NuGet"
    LINUX = "Linux"
    DEBIAN = "Debian"
    HEX = "Hex"
    ANDROID = "Android"
    GITHUB_ACTIONS = "GitHub Actions"
    PUB = "Pub"

    @classmethod
    def _missing_(cls, value: object) -> "Ecosystem | None":
        if not isinstance(value, str) or not value:
            return None
        member = str.__new__(cls, value)
        member._name_ = value
        member._value_ = value
        return member

    @property
    def is_known(self) -> bool:
        return type(self)._value2member_map_.get(self.value) is self

    @classmethod
    def parse(cls, value: Any) -> "Ecosystem":
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f"ecosystem must be a string, got {type(value).__name__}")
        if not value:
            raise ValueError("ecosystem must not be empty")
        return cls(value)


class RangeType(Enum):
    """Format of the versions carried by a range's events."""

    UNSPECIFIED = "UNSPECIFIED"  # range type omitted by the producer
    GIT = "GIT"
    SEMVER = "SEMVER"
    ECOSYSTEM = "ECOSYSTEM"


class EventKind(Enum):
    INTRODUCED = "introduced"
    FIXED = "fixed"
    LAST_AFFECTED = "last_affected"
    LIMIT = "limit"


class ReferenceType(Enum):
    UNDEFINED = "NONE"
    WEB = "WEB"
    ADVISORY = "ADVISORY"
    REPORT = "REPORT"
    FIX = "FIX"
    PACKAGE = "PACKAGE"
    ARTICLE = "ARTICLE"
    DETECTION = "DETECTION"
    DISCUSSION = "DISCUSSION"
    EVIDENCE = "EVIDENCE"
    INTRODUCED = "INTRODUCED"
    GIT = "GIT"


class SeverityType(Enum):
    """Quantitative scoring method behind a severity score."""

    UNSPECIFIED = "UNSPECIFIED"
    CVSS_V2 = "CVSS_V2"
    CVSS_V3 = "CVSS_V3"
    CVSS_V4 = "CVSS_V4"
