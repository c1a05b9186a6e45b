"""Pre-issued OAuth2 authorization-code access token provider."""

import httpx

from ...models import ExecutionContext
from ..base import BaseCredentialProvider, as_bearer
from ..registry import register_provider

ACCESS_TOKEN_SECRET = "OAUTH2_AUTHORIZATION_CODE_ACCESS_TOKEN"


@register_provider("oauth2_authorization_code", priority=30)
class AuthorizationCodeProvider(BaseCredentialProvider):
    """Present an access token obtained earlier through user consent."""

    @property
    def provider_type(self) -> str:
        return "oauth2_authorization_code"

    @property
    def accepted_configuration(self) -> str:
        return ACCESS_TOKEN_SECRET

    def can_activate(self, context: ExecutionContext) -> bool:
        return bool(context.secrets.get(ACCESS_TOKEN_SECRET))

    async def get_authorization(
        self, context: ExecutionContext, client: httpx.AsyncClient
    ) -> str:
        return as_bearer(context.secrets[ACCESS_TOKEN_SECRET])
