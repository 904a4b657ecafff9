from __future__ import annotations

from urllib.parse import quote

import httpx

from ..core.domain.errors import InvalidUrlError

DEFAULT_BASE_URL = "https://api.osv.dev/v1"


def get_osv_query_url(base_url: str = DEFAULT_BASE_URL) -> str:
	return f"{base_url.rstrip('/')}/query"


def get_osv_vuln_url(vuln_id: str, base_url: str = DEFAULT_BASE_URL) -> str:
	"""Join ``vuln_id`` onto ``<base_url>/vulns/`` as one percent-encoded path segment."""
	base = f"{base_url.rstrip('/')}/vulns/"
	if vuln_id in ("", ".", ".."):
		raise InvalidUrlError(base + vuln_id, "vulnerability id must be a non-empty path segment")
	try:
		url = httpx.URL(base).join(quote(vuln_id, safe=""))
	except (httpx.InvalidURL, UnicodeEncodeError) as e:
		raise InvalidUrlError(base + vuln_id, str(e)) from e
	if url.scheme not in ("http", "https") or not url.host:
		raise InvalidUrlError(str(url), "base url must be an absolute http(s) url")
	return str(url)
