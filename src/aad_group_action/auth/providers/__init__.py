"""Credential providers package.

Each provider registers itself with its resolution priority on import.
"""

from .authorization_code import AuthorizationCodeProvider
from .basic import BasicAuthProvider
from .bearer import BearerTokenProvider
from .client_credentials import ClientCredentialsProvider

__all__ = [
    "BearerTokenProvider",
    "BasicAuthProvider",
    "AuthorizationCodeProvider",
    "ClientCredentialsProvider",
]
