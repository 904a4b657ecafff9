"""Error taxonomy for the OSV client.

Every failure an operation can surface is an ``ApiError``; callers that only
care about "did it work" can catch the base class, callers that need to tell
"unknown package" from "service unreachable" catch the subclasses.
"""

from __future__ import annotations


class ApiError(Exception):
    """Base class for failures reported by the OSV client."""


class NotFoundError(ApiError):
    """The queried package, commit or vulnerability id is unknown to the service.

    ``identifier`` is ``package - `<name>` `` or ``commit - `<sha>` `` for queries
    and the bare id for direct lookups.
    """

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"requested resource {identifier} not found")


class InvalidUrlError(ApiError):
    """A request URL could not be composed from the base URL and the given id."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"invalid request url: {url!r} ({reason})")


class SerializationError(ApiError):
    """A request could not be encoded or a response body could not be decoded."""

    def __init__(self, message: str) -> None:
        self.detail = message
        super().__init__(f"serialization failure: {message}")


class SchemaError(SerializationError):
    """A decoded document violates the OSV schema (missing field, unknown closed tag)."""


class RequestFailedError(ApiError):
    """The transport failed below HTTP, or the service answered with an unhandled error status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(f"request to osv endpoint failed: {message}")


class UnexpectedError(ApiError):
    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail
        message = "unexpected error has occurred"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
