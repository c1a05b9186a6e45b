"""HTTP client construction for outbound calls.

Each invocation opens its own short-lived ``httpx.AsyncClient`` and closes
it before returning; no connection pool is shared across invocations.
Tests inject an ``httpx`` transport to intercept requests.
"""

import logging
from typing import Optional

import httpx

from ..config import ActionSettings

logger = logging.getLogger(__name__)


def create_timeout(
    connect: float = 5.0,
    read: float = 30.0,
    write: float = 30.0,
    pool: float = 5.0,
) -> httpx.Timeout:
    """Create a timeout configuration.

    :param connect: Connect timeout in seconds
    :type connect: float
    :param read: Read timeout in seconds
    :type read: float
    :param write: Write timeout in seconds
    :type write: float
    :param pool: Pool acquisition timeout in seconds
    :type pool: float
    :return: Configured timeout object
    :rtype: httpx.Timeout
    """
    return httpx.Timeout(connect=connect, read=read, write=write, pool=pool)


def create_http_client(
    settings: ActionSettings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Create an HTTP client for a single invocation.

    :param settings: Action settings providing timeouts
    :type settings: ActionSettings
    :param transport: Optional transport override
    :type transport: Optional[httpx.AsyncBaseTransport]
    :return: New async client; the caller owns and closes it
    :rtype: httpx.AsyncClient
    """
    timeout = create_timeout(
        connect=settings.connect_timeout_seconds,
        read=settings.request_timeout_seconds,
        write=settings.request_timeout_seconds,
    )
    logger.debug(f"Creating HTTP client with timeout {timeout}")
    return httpx.AsyncClient(timeout=timeout, transport=transport)
