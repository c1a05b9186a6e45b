"""Define the credential provider interface.

Each supported authentication scheme is a provider that can tell whether
the host context configures it and, if so, produce the value of the
``Authorization`` header. Providers are tried in a fixed priority order by
:mod:`aad_group_action.auth.resolver`.

Examples
--------
See :class:`aad_group_action.auth.providers.bearer.BearerTokenProvider` for
the smallest complete provider.
"""

from abc import ABC, abstractmethod

import httpx

from ..models import ExecutionContext


class BaseCredentialProvider(ABC):
    """Provide the core credential provider interface."""

    @property
    @abstractmethod
    def provider_type(self) -> str:
        """Return the provider type identifier.

        :return: Provider type (e.g., "bearer", "basic").
        """
        pass

    @property
    @abstractmethod
    def accepted_configuration(self) -> str:
        """Return the secret names that activate this provider.

        Used to build the error raised when no provider is configured.
        """
        pass

    @abstractmethod
    def can_activate(self, context: ExecutionContext) -> bool:
        """Return whether the context configures this scheme.

        Must not perform any network activity.

        :param context: Host execution context.
        :return: True if this provider should produce the header.
        """
        pass

    @abstractmethod
    async def get_authorization(
        self, context: ExecutionContext, client: httpx.AsyncClient
    ) -> str:
        """Return the ``Authorization`` header value.

        :param context: Host execution context.
        :param client: HTTP client for providers that call a token endpoint.
        :return: Header value such as ``"Bearer <token>"``.
        """
        pass


def as_bearer(token: str) -> str:
    """Prefix a token with ``Bearer`` unless it already carries it."""
    return token if token.startswith("Bearer ") else f"Bearer {token}"
