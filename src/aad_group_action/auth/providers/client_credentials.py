"""OAuth2 client-credentials provider.

The only provider that calls the network: it exchanges the configured
client id and secret for an access token on every invocation. Tokens are
not cached between invocations.
"""

import logging

import httpx

from ...exceptions import ConfigurationError
from ...models import ClientCredentialsConfig, ExecutionContext
from ..base import BaseCredentialProvider, as_bearer
from ..oauth import get_client_credentials_token
from ..registry import register_provider

logger = logging.getLogger(__name__)

CLIENT_SECRET = "OAUTH2_CLIENT_CREDENTIALS_CLIENT_SECRET"
TOKEN_URL_VARIABLE = "OAUTH2_CLIENT_CREDENTIALS_TOKEN_URL"
CLIENT_ID_VARIABLE = "OAUTH2_CLIENT_CREDENTIALS_CLIENT_ID"
SCOPE_VARIABLE = "OAUTH2_CLIENT_CREDENTIALS_SCOPE"
AUDIENCE_VARIABLE = "OAUTH2_CLIENT_CREDENTIALS_AUDIENCE"
AUTH_STYLE_VARIABLE = "OAUTH2_CLIENT_CREDENTIALS_AUTH_STYLE"


@register_provider("oauth2_client_credentials", priority=40)
class ClientCredentialsProvider(BaseCredentialProvider):
    """Fetch a bearer token with the client-credentials grant.

    Activated by the client secret; the token URL and client id come from
    the environment and must both be present once the secret is set.
    """

    @property
    def provider_type(self) -> str:
        return "oauth2_client_credentials"

    @property
    def accepted_configuration(self) -> str:
        return "OAUTH2_CLIENT_CREDENTIALS_*"

    def can_activate(self, context: ExecutionContext) -> bool:
        return bool(context.secrets.get(CLIENT_SECRET))

    def build_config(self, context: ExecutionContext) -> ClientCredentialsConfig:
        """Collect the token-exchange configuration from the context.

        :raises ConfigurationError: If the token URL or client id is missing
        """
        env = context.environment
        token_url = env.get(TOKEN_URL_VARIABLE)
        client_id = env.get(CLIENT_ID_VARIABLE)
        if not token_url or not client_id:
            raise ConfigurationError(
                "OAuth2 Client Credentials flow requires TOKEN_URL and CLIENT_ID in env",
                setting=TOKEN_URL_VARIABLE if not token_url else CLIENT_ID_VARIABLE,
            )
        return ClientCredentialsConfig(
            token_url=token_url,
            client_id=client_id,
            client_secret=context.secrets[CLIENT_SECRET],
            scope=env.get(SCOPE_VARIABLE) or None,
            audience=env.get(AUDIENCE_VARIABLE) or None,
            auth_style=env.get(AUTH_STYLE_VARIABLE) or None,
        )

    async def get_authorization(
        self, context: ExecutionContext, client: httpx.AsyncClient
    ) -> str:
        config = self.build_config(context)
        logger.info(f"Exchanging client credentials for client {config.client_id}")
        token = await get_client_credentials_token(client, config)
        return as_bearer(token)
