"""HTTP Basic credentials provider."""

import base64

import httpx

from ...models import ExecutionContext
from ..base import BaseCredentialProvider
from ..registry import register_provider

USERNAME_SECRET = "BASIC_USERNAME"
PASSWORD_SECRET = "BASIC_PASSWORD"


@register_provider("basic", priority=20)
class BasicAuthProvider(BaseCredentialProvider):
    """Encode ``BASIC_USERNAME``/``BASIC_PASSWORD`` as Basic credentials.

    Both secrets must be present; a lone username or password does not
    activate the provider.
    """

    @property
    def provider_type(self) -> str:
        return "basic"

    @property
    def accepted_configuration(self) -> str:
        return f"{USERNAME_SECRET}/{PASSWORD_SECRET}"

    def can_activate(self, context: ExecutionContext) -> bool:
        return bool(
            context.secrets.get(USERNAME_SECRET) and context.secrets.get(PASSWORD_SECRET)
        )

    async def get_authorization(
        self, context: ExecutionContext, client: httpx.AsyncClient
    ) -> str:
        pair = f"{context.secrets[USERNAME_SECRET]}:{context.secrets[PASSWORD_SECRET]}"
        return f"Basic {base64.b64encode(pair.encode('utf-8')).decode('ascii')}"
