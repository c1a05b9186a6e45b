"""Group-membership request against a Microsoft Graph compatible endpoint.

The configured base URL selects the endpoint that receives the request; the
OData reference in the body always names the user on the canonical
``graph.microsoft.com`` host.
"""

import logging
from typing import Dict, Optional
from urllib.parse import quote

import httpx

from ..exceptions import ConfigurationError
from ..models import ExecutionContext, InvocationParams
from ..utils.security import sanitize_headers

logger = logging.getLogger(__name__)

GRAPH_RESOURCE_BASE = "https://graph.microsoft.com/v1.0"
ADDRESS_VARIABLE = "ADDRESS"

# Unreserved marks left unescaped in addition to quote()'s defaults
_COMPONENT_SAFE = "!*'()"


def encode_component(value: str) -> str:
    """Percent-encode a single URL component, including ``/``, ``@`` and ``+``."""
    return quote(value, safe=_COMPONENT_SAFE)


def resolve_base_url(
    params: InvocationParams,
    context: ExecutionContext,
    legacy_variable: Optional[str] = "AZURE_AD_TENANT_URL",
) -> str:
    """Return the API base URL without a trailing slash.

    The ``address`` parameter wins over ``ADDRESS`` in the environment,
    which wins over the legacy tenant URL variable.

    :raises ConfigurationError: If no address is configured
    """
    address = params.address or context.environment.get(ADDRESS_VARIABLE)
    if not address and legacy_variable:
        address = context.environment.get(legacy_variable)
    if not address:
        raise ConfigurationError(
            "No URL specified. Provide address parameter or ADDRESS environment variable",
            setting=ADDRESS_VARIABLE,
        )
    return address[:-1] if address.endswith("/") else address


def build_member_url(base_url: str, group_id: str) -> str:
    """Return the ``members/$ref`` URL for a group."""
    return f"{base_url}/v1.0/groups/{encode_component(group_id)}/members/$ref"


def build_member_reference(user_principal_name: str) -> Dict[str, str]:
    """Return the OData reference body naming the user."""
    return {
        "@odata.id": f"{GRAPH_RESOURCE_BASE}/users/{encode_component(user_principal_name)}"
    }


async def add_user_to_group(
    client: httpx.AsyncClient,
    user_principal_name: str,
    group_id: str,
    base_url: str,
    headers: Dict[str, str],
) -> httpx.Response:
    """POST the membership reference and return the raw response.

    Status codes are not interpreted here; see
    :func:`aad_group_action.graph.classifier.classify_response`.
    """
    url = build_member_url(base_url, group_id)
    body = build_member_reference(user_principal_name)
    logger.debug(f"POST {url} headers={sanitize_headers(headers)}")
    return await client.post(url, json=body, headers=headers)
