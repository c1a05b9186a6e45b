"""OAuth2 client-credentials token exchange.

Performs the form-encoded POST to the token endpoint and returns the bare
access token. Client credentials travel either as HTTP Basic credentials
(the default) or as form fields when the auth style is ``InParams``.
"""

import json
import logging

import httpx

from ..exceptions import TokenExchangeError
from ..models import ClientCredentialsConfig

logger = logging.getLogger(__name__)


def _error_text(response: httpx.Response) -> str:
    """Return the error body, re-serialized when it is JSON."""
    try:
        return json.dumps(response.json())
    except ValueError:
        return response.text


async def get_client_credentials_token(
    client: httpx.AsyncClient, config: ClientCredentialsConfig
) -> str:
    """Exchange client credentials for an access token.

    :param client: HTTP client used for the token request
    :type client: httpx.AsyncClient
    :param config: Token endpoint and client credentials
    :type config: ClientCredentialsConfig
    :return: The bare access token (without a ``Bearer`` prefix)
    :rtype: str
    :raises TokenExchangeError: If the endpoint does not return a token
    """
    form = {"grant_type": "client_credentials"}
    if config.scope:
        form["scope"] = config.scope
    if config.audience:
        form["audience"] = config.audience

    headers = {
        "Content-Type": "application/x-www-form-urlencoded",
        "Accept": "application/json",
    }
    auth = None
    if config.credentials_in_params:
        form["client_id"] = config.client_id
        form["client_secret"] = config.client_secret
    else:
        auth = httpx.BasicAuth(config.client_id, config.client_secret)

    logger.debug(
        f"Requesting client-credentials token from {config.token_url} "
        f"(auth style: {'InParams' if config.credentials_in_params else 'InHeader'})"
    )
    response = await client.post(config.token_url, data=form, headers=headers, auth=auth)

    if not response.is_success:
        error_text = _error_text(response)
        logger.error(f"Token request failed: {response.status_code} - {error_text}")
        raise TokenExchangeError(
            f"OAuth2 token request failed: {response.status_code} "
            f"{response.reason_phrase} - {error_text}",
            status_code=response.status_code,
            response_body=error_text,
        )

    try:
        data = response.json()
    except ValueError:
        data = {}
    access_token = data.get("access_token") if isinstance(data, dict) else None
    if not access_token:
        raise TokenExchangeError(
            "No access_token in OAuth2 response", status_code=response.status_code
        )

    logger.debug(f"Access token obtained, expires in {data.get('expires_in', 'unknown')}s")
    return access_token
