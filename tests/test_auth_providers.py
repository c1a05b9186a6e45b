"""Tests for the credential provider architecture."""

import base64
import json
from urllib.parse import parse_qs

import httpx
import pytest

from aad_group_action.auth import AuthorizationResolver, ProviderRegistry
from aad_group_action.auth.oauth import get_client_credentials_token
from aad_group_action.auth.providers import (
    AuthorizationCodeProvider,
    BasicAuthProvider,
    BearerTokenProvider,
    ClientCredentialsProvider,
)
from aad_group_action.exceptions import (
    ConfigurationError,
    ErrorCategory,
    TokenExchangeError,
)
from aad_group_action.models import ClientCredentialsConfig, ExecutionContext

TOKEN_URL = "https://login.example.com/oauth2/token"


def make_context(environment=None, secrets=None) -> ExecutionContext:
    return ExecutionContext.from_mapping(
        {"environment": environment or {}, "secrets": secrets or {}}
    )


def client_credentials_env(**overrides):
    env = {
        "OAUTH2_CLIENT_CREDENTIALS_TOKEN_URL": TOKEN_URL,
        "OAUTH2_CLIENT_CREDENTIALS_CLIENT_ID": "client-id",
    }
    env.update(overrides)
    return env


def form_of(request: httpx.Request) -> dict:
    return {key: values[0] for key, values in parse_qs(request.content.decode()).items()}


class TestProviderRegistry:
    """Tests for the provider registry."""

    def test_builtin_providers_in_priority_order(self):
        assert ProviderRegistry.list_providers() == [
            "bearer",
            "basic",
            "oauth2_authorization_code",
            "oauth2_client_credentials",
        ]

    def test_ordered_providers_instantiates_classes(self):
        providers = ProviderRegistry.ordered_providers()
        assert [type(p) for p in providers] == [
            BearerTokenProvider,
            BasicAuthProvider,
            AuthorizationCodeProvider,
            ClientCredentialsProvider,
        ]

    def test_duplicate_type_rejected(self):
        with pytest.raises(ValueError, match="already registered"):
            ProviderRegistry.register("bearer", BearerTokenProvider, priority=99)

    def test_duplicate_priority_rejected(self):
        with pytest.raises(ValueError, match="Priority 10"):
            ProviderRegistry.register("another", BearerTokenProvider, priority=10)
        assert ProviderRegistry.get_provider_class("another") is None


@pytest.mark.auth
class TestAuthorizationResolver:
    """Tests for priority-ordered resolution of the Authorization header."""

    @pytest.mark.asyncio
    async def test_bearer_token_prefixed(self, recorder):
        context = make_context(secrets={"BEARER_AUTH_TOKEN": "abc"})
        async with httpx.AsyncClient(transport=recorder.transport) as client:
            header = await AuthorizationResolver().get_authorization_header(context, client)
        assert header == "Bearer abc"

    @pytest.mark.asyncio
    async def test_bearer_token_prefix_not_doubled(self, recorder):
        context = make_context(secrets={"BEARER_AUTH_TOKEN": "Bearer abc"})
        async with httpx.AsyncClient(transport=recorder.transport) as client:
            header = await AuthorizationResolver().get_authorization_header(context, client)
        assert header == "Bearer abc"

    @pytest.mark.asyncio
    async def test_basic_credentials_encoded(self, recorder):
        context = make_context(
            secrets={"BASIC_USERNAME": "admin", "BASIC_PASSWORD": "p@ss:word"}
        )
        async with httpx.AsyncClient(transport=recorder.transport) as client:
            header = await AuthorizationResolver().get_authorization_header(context, client)
        assert header == "Basic " + base64.b64encode(b"admin:p@ss:word").decode()

    def test_basic_requires_both_secrets(self):
        context = make_context(secrets={"BASIC_USERNAME": "admin"})
        with pytest.raises(ConfigurationError, match="No authentication configured"):
            AuthorizationResolver().select_provider(context)

    @pytest.mark.asyncio
    async def test_authorization_code_token(self, recorder):
        context = make_context(
            secrets={"OAUTH2_AUTHORIZATION_CODE_ACCESS_TOKEN": "user-token"}
        )
        async with httpx.AsyncClient(transport=recorder.transport) as client:
            header = await AuthorizationResolver().get_authorization_header(context, client)
        assert header == "Bearer user-token"

    def test_static_schemes_win_over_leftover_secrets(self):
        context = make_context(
            environment=client_credentials_env(),
            secrets={
                "BASIC_USERNAME": "admin",
                "BASIC_PASSWORD": "pw",
                "OAUTH2_AUTHORIZATION_CODE_ACCESS_TOKEN": "user-token",
                "OAUTH2_CLIENT_CREDENTIALS_CLIENT_SECRET": "secret",
            },
        )
        provider = AuthorizationResolver().select_provider(context)
        assert isinstance(provider, BasicAuthProvider)

    def test_bearer_wins_over_everything(self):
        context = make_context(
            secrets={
                "BEARER_AUTH_TOKEN": "abc",
                "BASIC_USERNAME": "admin",
                "BASIC_PASSWORD": "pw",
            }
        )
        provider = AuthorizationResolver().select_provider(context)
        assert isinstance(provider, BearerTokenProvider)

    def test_no_scheme_error_lists_accepted_schemes(self):
        with pytest.raises(ConfigurationError) as exc:
            AuthorizationResolver().select_provider(make_context())
        assert str(exc.value) == (
            "No authentication configured. Provide one of: BEARER_AUTH_TOKEN, "
            "BASIC_USERNAME/BASIC_PASSWORD, OAUTH2_AUTHORIZATION_CODE_ACCESS_TOKEN, "
            "or OAUTH2_CLIENT_CREDENTIALS_*"
        )
        assert exc.value.category == ErrorCategory.CONFIGURATION

    @pytest.mark.asyncio
    async def test_create_auth_headers(self, recorder):
        context = make_context(secrets={"BEARER_AUTH_TOKEN": "abc"})
        async with httpx.AsyncClient(transport=recorder.transport) as client:
            headers = await AuthorizationResolver().create_auth_headers(context, client)
        assert headers == {
            "Authorization": "Bearer abc",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }


@pytest.mark.auth
class TestClientCredentialsProvider:
    """Tests for the OAuth2 client-credentials provider."""

    def test_requires_token_url_and_client_id(self):
        context = make_context(
            environment={"OAUTH2_CLIENT_CREDENTIALS_CLIENT_ID": "client-id"},
            secrets={"OAUTH2_CLIENT_CREDENTIALS_CLIENT_SECRET": "secret"},
        )
        with pytest.raises(ConfigurationError, match="requires TOKEN_URL and CLIENT_ID"):
            ClientCredentialsProvider().build_config(context)

    def test_build_config_reads_optional_settings(self):
        context = make_context(
            environment=client_credentials_env(
                OAUTH2_CLIENT_CREDENTIALS_SCOPE="https://graph.microsoft.com/.default",
                OAUTH2_CLIENT_CREDENTIALS_AUDIENCE="graph",
                OAUTH2_CLIENT_CREDENTIALS_AUTH_STYLE="InParams",
            ),
            secrets={"OAUTH2_CLIENT_CREDENTIALS_CLIENT_SECRET": "secret"},
        )
        config = ClientCredentialsProvider().build_config(context)
        assert config.token_url == TOKEN_URL
        assert config.client_id == "client-id"
        assert config.client_secret == "secret"
        assert config.scope == "https://graph.microsoft.com/.default"
        assert config.audience == "graph"
        assert config.credentials_in_params

    @pytest.mark.asyncio
    async def test_exchanged_token_used_as_bearer(self, recorder):
        recorder.queue(httpx.Response(200, json={"access_token": "exchanged"}))
        context = make_context(
            environment=client_credentials_env(),
            secrets={"OAUTH2_CLIENT_CREDENTIALS_CLIENT_SECRET": "secret"},
        )
        async with httpx.AsyncClient(transport=recorder.transport) as client:
            header = await AuthorizationResolver().get_authorization_header(context, client)
        assert header == "Bearer exchanged"
        assert recorder.call_count == 1


@pytest.mark.auth
class TestTokenExchange:
    """Tests for the client-credentials token request."""

    @pytest.mark.asyncio
    async def test_credentials_in_header_by_default(self, recorder):
        recorder.queue(httpx.Response(200, json={"access_token": "tok"}))
        config = ClientCredentialsConfig(
            token_url=TOKEN_URL,
            client_id="client-id",
            client_secret="secret",
            scope="scope-a",
        )
        async with httpx.AsyncClient(transport=recorder.transport) as client:
            token = await get_client_credentials_token(client, config)

        assert token == "tok"
        request = recorder.requests[0]
        assert request.method == "POST"
        assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert request.headers["Authorization"] == (
            "Basic " + base64.b64encode(b"client-id:secret").decode()
        )
        assert form_of(request) == {"grant_type": "client_credentials", "scope": "scope-a"}

    @pytest.mark.asyncio
    async def test_credentials_in_params(self, recorder):
        recorder.queue(httpx.Response(200, json={"access_token": "tok"}))
        config = ClientCredentialsConfig(
            token_url=TOKEN_URL,
            client_id="client-id",
            client_secret="secret",
            audience="api",
            auth_style="InParams",
        )
        async with httpx.AsyncClient(transport=recorder.transport) as client:
            await get_client_credentials_token(client, config)

        request = recorder.requests[0]
        assert "Authorization" not in request.headers
        assert form_of(request) == {
            "grant_type": "client_credentials",
            "audience": "api",
            "client_id": "client-id",
            "client_secret": "secret",
        }

    @pytest.mark.asyncio
    async def test_json_error_body_included(self, recorder):
        recorder.queue(httpx.Response(401, json={"error": "invalid_client"}))
        config = ClientCredentialsConfig(
            token_url=TOKEN_URL, client_id="client-id", client_secret="bad"
        )
        async with httpx.AsyncClient(transport=recorder.transport) as client:
            with pytest.raises(TokenExchangeError) as exc:
                await get_client_credentials_token(client, config)

        assert str(exc.value) == (
            "OAuth2 token request failed: 401 Unauthorized - "
            + json.dumps({"error": "invalid_client"})
        )
        assert exc.value.status_code == 401
        assert exc.value.category == ErrorCategory.AUTHENTICATION

    @pytest.mark.asyncio
    async def test_text_error_body_included(self, recorder):
        recorder.queue(httpx.Response(503, text="maintenance"))
        config = ClientCredentialsConfig(
            token_url=TOKEN_URL, client_id="client-id", client_secret="secret"
        )
        async with httpx.AsyncClient(transport=recorder.transport) as client:
            with pytest.raises(TokenExchangeError, match="503 Service Unavailable - maintenance") as exc:
                await get_client_credentials_token(client, config)

        assert exc.value.category == ErrorCategory.TRANSIENT

    @pytest.mark.asyncio
    async def test_missing_access_token(self, recorder):
        recorder.queue(httpx.Response(200, json={"token_type": "Bearer"}))
        config = ClientCredentialsConfig(
            token_url=TOKEN_URL, client_id="client-id", client_secret="secret"
        )
        async with httpx.AsyncClient(transport=recorder.transport) as client:
            with pytest.raises(TokenExchangeError, match="No access_token in OAuth2 response"):
                await get_client_credentials_token(client, config)
