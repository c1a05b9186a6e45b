"""Static bearer token provider."""

import httpx

from ...models import ExecutionContext
from ..base import BaseCredentialProvider, as_bearer
from ..registry import register_provider

BEARER_SECRET = "BEARER_AUTH_TOKEN"


@register_provider("bearer", priority=10)
class BearerTokenProvider(BaseCredentialProvider):
    """Use the ``BEARER_AUTH_TOKEN`` secret verbatim."""

    @property
    def provider_type(self) -> str:
        return "bearer"

    @property
    def accepted_configuration(self) -> str:
        return BEARER_SECRET

    def can_activate(self, context: ExecutionContext) -> bool:
        return bool(context.secrets.get(BEARER_SECRET))

    async def get_authorization(
        self, context: ExecutionContext, client: httpx.AsyncClient
    ) -> str:
        return as_bearer(context.secrets[BEARER_SECRET])
