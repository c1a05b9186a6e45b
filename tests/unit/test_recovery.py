"""Unit tests for error categorization and the one-shot retry policy."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from aad_group_action.exceptions import (
    AuthenticationError,
    ConfigurationError,
    ErrorCategory,
    GraphAPIError,
    TokenExchangeError,
    ValidationError,
)
from aad_group_action.recovery import OneShotRetryPolicy, classify_error, error_message


class TestClassifyError:
    @pytest.mark.parametrize(
        "error,category",
        [
            ({"message": "Rate limited: 429"}, ErrorCategory.TRANSIENT),
            ("Server error: 502", ErrorCategory.TRANSIENT),
            (RuntimeError("upstream 503"), ErrorCategory.TRANSIENT),
            ({"message": "Gateway 504"}, ErrorCategory.TRANSIENT),
            (Exception("Authentication failed: 401"), ErrorCategory.AUTHENTICATION),
            ("Forbidden 403", ErrorCategory.AUTHENTICATION),
            ({"message": "Unknown error occurred"}, ErrorCategory.UNCLASSIFIED),
            (None, ErrorCategory.UNCLASSIFIED),
        ],
    )
    def test_message_based_categories(self, error, category):
        assert classify_error(error) == category

    def test_codes_inside_longer_numbers_ignored(self):
        assert classify_error("request id 14290 failed") == ErrorCategory.UNCLASSIFIED

    def test_transient_wins_when_both_present(self):
        assert classify_error("401 then 503") == ErrorCategory.TRANSIENT

    def test_structured_errors_use_their_category(self):
        # message text is ignored for structured errors
        assert (
            classify_error(GraphAPIError("mentions 429", status_code=400))
            == ErrorCategory.CLIENT
        )
        assert classify_error(ConfigurationError("x")) == ErrorCategory.CONFIGURATION
        assert classify_error(ValidationError("x")) == ErrorCategory.CONFIGURATION
        assert (
            classify_error(TokenExchangeError("x", status_code=400))
            == ErrorCategory.AUTHENTICATION
        )

    def test_error_message_shapes(self):
        assert error_message({"message": "m"}) == "m"
        assert error_message(GraphAPIError("g")) == "g"
        assert error_message(ValueError("v")) == "v"
        assert error_message(None) == ""


class TestOneShotRetryPolicy:
    @pytest.mark.asyncio
    async def test_transient_retries_once_after_delay(self):
        retry = AsyncMock(return_value=httpx.Response(204))
        delays = []
        policy = OneShotRetryPolicy(delay_seconds=2.5)

        with patch("aad_group_action.recovery.asyncio.sleep", new=AsyncMock()) as sleep:
            recovered = await policy.recover("429", retry, delays.append)

        assert recovered is True
        sleep.assert_awaited_once_with(2.5)
        retry.assert_awaited_once()
        assert delays == [2.5]

    @pytest.mark.asyncio
    async def test_retry_exception_swallowed(self):
        retry = AsyncMock(side_effect=httpx.ReadTimeout("slow"))
        policy = OneShotRetryPolicy(delay_seconds=0)

        recovered = await policy.recover({"message": "503"}, retry)

        assert recovered is False
        retry.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_authentication_reraised_immediately(self):
        retry = AsyncMock()
        policy = OneShotRetryPolicy(delay_seconds=5)

        with patch("aad_group_action.recovery.asyncio.sleep", new=AsyncMock()) as sleep:
            with pytest.raises(AuthenticationError, match="401"):
                await policy.recover({"message": "Unauthorized 401"}, retry)

        sleep.assert_not_awaited()
        retry.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unclassified_defers_to_host(self):
        retry = AsyncMock()
        policy = OneShotRetryPolicy(delay_seconds=5)

        assert await policy.recover(ValueError("boom"), retry) is False
        retry.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_configuration_error_defers_to_host(self):
        retry = AsyncMock()
        policy = OneShotRetryPolicy(delay_seconds=5)

        assert await policy.recover(ConfigurationError("missing"), retry) is False
        retry.assert_not_awaited()
