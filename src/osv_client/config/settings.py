from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .._version import __version__
from .urls import DEFAULT_BASE_URL


class OsvSettings(BaseSettings):
    """Client configuration with automatic environment variable loading.

    Every setting can be overridden via environment variables with the OSV_CLIENT_ prefix:
        - OSV_CLIENT_BASE_URL=https://api-staging.osv.dev/v1
        - OSV_CLIENT_TIMEOUT_SECONDS=10
        - OSV_CLIENT_MAX_REDIRECTS=5
        - OSV_CLIENT_USER_AGENT=my-scanner/1.0

    or programmatically:
        settings = OsvSettings(timeout_seconds=5)
    """

    model_config = SettingsConfigDict(
        env_prefix="OSV_CLIENT_",
        case_sensitive=False,
        extra="forbid",
    )

    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        description="Origin and version prefix of the OSV API; /query and /vulns/<id> are appended",
    )

    timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout applied to connect, read, write and pool acquisition of each request",
    )

    max_redirects: int = Field(
        default=10,
        ge=0,
        description="Maximum number of redirects followed before the request fails",
    )

    user_agent: str = Field(
        default=f"osv-client/{__version__}",
        description="User-Agent header sent with every request",
    )
