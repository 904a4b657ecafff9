"""osv_client package: app/core/infra/config.

Typed client for the OSV vulnerability database API (https://osv.dev).
Expose the query facade and the OSV schema model at the package level.
"""

from ._version import __version__
from .app.api import async_connect, connect, query, query_commit, query_package, vulnerability
from .config.settings import OsvSettings
from .core.client import AsyncOsvClient, OsvClient
from .core.domain.enums import Ecosystem, EventKind, RangeType, ReferenceType, SeverityType
from .core.domain.errors import (
    ApiError,
    InvalidUrlError,
    NotFoundError,
    RequestFailedError,
    SchemaError,
    SerializationError,
    UnexpectedError,
)
from .core.domain.models import (
    Affected,
    CommitQuery,
    Credit,
    Event,
    Package,
    PackageQuery,
    Range,
    Reference,
    Request,
    Severity,
    Vulnerability,
)

import logging

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "connect",
    "async_connect",
    "query",
    "query_package",
    "query_commit",
    "vulnerability",
    "OsvClient",
    "AsyncOsvClient",
    "OsvSettings",
    "Ecosystem",
    "EventKind",
    "RangeType",
    "ReferenceType",
    "SeverityType",
    "ApiError",
    "NotFoundError",
    "InvalidUrlError",
    "SerializationError",
    "SchemaError",
    "RequestFailedError",
    "UnexpectedError",
    "Affected",
    "CommitQuery",
    "Credit",
    "Event",
    "Package",
    "PackageQuery",
    "Range",
    "Reference",
    "Request",
    "Severity",
    "Vulnerability",
]
