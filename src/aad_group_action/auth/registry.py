"""Manage registration and ordering of credential providers.

Providers register with a priority; resolution walks them from the lowest
priority number upwards and stops at the first one that can activate.
Static schemes are registered ahead of schemes that call the network.

Examples
--------
.. code-block:: python

   from aad_group_action.auth.registry import register_provider
   from aad_group_action.auth.base import BaseCredentialProvider

   @register_provider("example", priority=50)
   class ExampleProvider(BaseCredentialProvider):
       ...
"""

import logging
from typing import Dict, List, Optional, Tuple, Type

from .base import BaseCredentialProvider

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Registry for credential providers.

    Manage registration, lookup, and ordered instantiation of providers.
    """

    _providers: Dict[str, Tuple[int, Type[BaseCredentialProvider]]] = {}

    @classmethod
    def register(
        cls,
        provider_type: str,
        provider_class: Type[BaseCredentialProvider],
        priority: int,
    ) -> None:
        """Register a provider class.

        :param provider_type: Unique identifier for the provider type.
        :param provider_class: Provider class to register.
        :param priority: Resolution order; lower values are tried first.
        :raises ValueError: If the type or the priority is already taken.
        """
        if provider_type in cls._providers:
            raise ValueError(f"Provider type '{provider_type}' is already registered")
        for existing_type, (existing_priority, _) in cls._providers.items():
            if existing_priority == priority:
                raise ValueError(
                    f"Priority {priority} is already used by provider '{existing_type}'"
                )

        cls._providers[provider_type] = (priority, provider_class)
        logger.debug(
            f"Registered provider: {provider_type} -> {provider_class.__name__} "
            f"(priority {priority})"
        )

    @classmethod
    def get_provider_class(
        cls, provider_type: str
    ) -> Optional[Type[BaseCredentialProvider]]:
        """Return a registered provider class, or None."""
        entry = cls._providers.get(provider_type)
        return entry[1] if entry else None

    @classmethod
    def ordered_providers(cls) -> List[BaseCredentialProvider]:
        """Instantiate every registered provider in priority order.

        :return: Provider instances, highest priority first.
        """
        entries = sorted(cls._providers.values(), key=lambda entry: entry[0])
        return [provider_class() for _, provider_class in entries]

    @classmethod
    def list_providers(cls) -> List[str]:
        """List registered provider types in priority order."""
        return [
            provider_type
            for provider_type, _ in sorted(
                cls._providers.items(), key=lambda item: item[1][0]
            )
        ]


def register_provider(provider_type: str, priority: int):
    """Return a decorator to auto-register a provider class.

    :param provider_type: Type identifier for the provider.
    :param priority: Resolution order; lower values are tried first.
    :return: Decorator function.
    """

    def decorator(provider_class: Type[BaseCredentialProvider]):
        ProviderRegistry.register(provider_type, provider_class, priority)
        return provider_class

    return decorator
