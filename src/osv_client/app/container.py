from __future__ import annotations

import logging

from dependency_injector import containers, providers

from ..config.settings import OsvSettings
from ..core.client import OsvClient
from ..infra.http_client import HttpClient

logger = logging.getLogger(__name__)


def http_client_resource(timeout_seconds, max_redirects, user_agent):
	"""Pooled HTTP transport, closed when the container shuts its resources down."""
	logger.debug(f"Initializing HTTP transport (timeout={timeout_seconds}s, max_redirects={max_redirects})")
	client = HttpClient(
		base_headers={"User-Agent": user_agent},
		timeout_seconds=timeout_seconds,
		max_redirects=max_redirects,
	)
	try:
		yield client
	finally:
		logger.debug("Closing HTTP transport")
		client.close()


class Container(containers.DeclarativeContainer):
	config = providers.Configuration(pydantic_settings=[OsvSettings()])

	http_client = providers.Resource(
		http_client_resource,
		timeout_seconds=config.timeout_seconds,
		max_redirects=config.max_redirects,
		user_agent=config.user_agent,
	)

	osv_client = providers.Factory(OsvClient, transport=http_client, base_url=config.base_url)
