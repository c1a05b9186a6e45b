"""Resolve the Authorization header from the host context.

Registered providers are tried in priority order and the first one the
context configures wins, so leftover secrets from a previously configured
scheme never change which scheme is used:

1. ``BEARER_AUTH_TOKEN``
2. ``BASIC_USERNAME`` / ``BASIC_PASSWORD``
3. ``OAUTH2_AUTHORIZATION_CODE_ACCESS_TOKEN``
4. ``OAUTH2_CLIENT_CREDENTIALS_*`` (token exchange)
"""

import logging
from typing import Dict, List, Optional

import httpx

from ..exceptions import ConfigurationError
from ..models import ExecutionContext
from .base import BaseCredentialProvider
from .registry import ProviderRegistry

logger = logging.getLogger(__name__)


class AuthorizationResolver:
    """Pick the first configured credential provider and use it.

    :param providers: Providers in priority order; defaults to the registry
    :type providers: Optional[List[BaseCredentialProvider]]
    """

    def __init__(self, providers: Optional[List[BaseCredentialProvider]] = None):
        self.providers = (
            providers if providers is not None else ProviderRegistry.ordered_providers()
        )

    def select_provider(self, context: ExecutionContext) -> BaseCredentialProvider:
        """Return the highest-priority provider the context configures.

        :raises ConfigurationError: If no provider can activate
        """
        for provider in self.providers:
            if provider.can_activate(context):
                logger.debug(f"Using {provider.provider_type} authentication")
                return provider

        accepted = [provider.accepted_configuration for provider in self.providers]
        if len(accepted) > 1:
            accepted_text = ", ".join(accepted[:-1]) + f", or {accepted[-1]}"
        else:
            accepted_text = "".join(accepted)
        raise ConfigurationError(
            f"No authentication configured. Provide one of: {accepted_text}"
        )

    async def get_authorization_header(
        self, context: ExecutionContext, client: httpx.AsyncClient
    ) -> str:
        """Return the ``Authorization`` header value for the context."""
        provider = self.select_provider(context)
        return await provider.get_authorization(context, client)

    async def create_auth_headers(
        self, context: ExecutionContext, client: httpx.AsyncClient
    ) -> Dict[str, str]:
        """Return request headers carrying authorization and JSON content type."""
        return {
            "Authorization": await self.get_authorization_header(context, client),
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
