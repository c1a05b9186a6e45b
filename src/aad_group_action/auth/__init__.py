"""Authentication for the group-membership action.

Credential schemes are implemented as providers registered with a fixed
priority; :class:`AuthorizationResolver` picks the first one the host
context configures.
"""

# Import providers to trigger registration
from . import (  # noqa: F401  # imported for side effects (provider registration)
    providers,
)
from .base import BaseCredentialProvider, as_bearer
from .oauth import get_client_credentials_token
from .registry import ProviderRegistry, register_provider
from .resolver import AuthorizationResolver

__all__ = [
    "AuthorizationResolver",
    "BaseCredentialProvider",
    "ProviderRegistry",
    "as_bearer",
    "get_client_credentials_token",
    "register_provider",
]
