"""Recovery policy for failed invocations.

One-shot local retry: a transient failure (429, 502, 503, 504) waits a
fixed delay and repeats the whole request once. Authentication failures
(401, 403) are re-raised without waiting. Everything else asks the host to
retry. The policy never retries more than once.

Errors raised by this package carry an explicit category. Errors coming
from the host in any other shape (other exceptions, ``{"message": ...}``
mappings, plain strings) are categorized from the status code embedded in
their message.
"""

import asyncio
import logging
import re
from typing import Any, Awaitable, Callable, Mapping, Optional

import httpx

from .exceptions import (
    ActionError,
    AuthenticationError,
    ErrorCategory,
    categorize_status,
)

logger = logging.getLogger(__name__)

_STATUS_IN_MESSAGE = re.compile(r"(?<!\d)(429|502|503|504|401|403)(?!\d)")


def error_message(error: Any) -> str:
    """Return the human-readable message of a host-supplied error."""
    if error is None:
        return ""
    if isinstance(error, ActionError):
        return error.message
    if isinstance(error, Mapping):
        return str(error.get("message", ""))
    return str(error)


def classify_error(error: Any) -> ErrorCategory:
    """Return the recovery category for an error.

    :param error: Error handed to the recovery handler
    :type error: Any
    :return: The error's own category, or one derived from its message
    :rtype: ErrorCategory
    """
    if isinstance(error, ActionError):
        return error.category
    categories = {
        categorize_status(int(code))
        for code in _STATUS_IN_MESSAGE.findall(error_message(error))
    }
    # transient codes take precedence when a message mentions both kinds
    for category in (ErrorCategory.TRANSIENT, ErrorCategory.AUTHENTICATION):
        if category in categories:
            return category
    return ErrorCategory.UNCLASSIFIED


def as_exception(error: Any) -> BaseException:
    """Return an exception that can be re-raised for the error."""
    if isinstance(error, BaseException):
        return error
    return AuthenticationError(error_message(error))


class OneShotRetryPolicy:
    """Retry transient failures once after a fixed delay.

    :param delay_seconds: Wait before the single retry
    :type delay_seconds: float
    """

    def __init__(self, delay_seconds: float = 5.0):
        self.delay_seconds = delay_seconds

    async def recover(
        self,
        error: Any,
        retry: Callable[[], Awaitable[httpx.Response]],
        on_retry: Optional[Callable[[float], None]] = None,
    ) -> bool:
        """Decide how to recover from an error.

        :param error: Error that ended the primary invocation
        :param retry: Coroutine factory repeating the full request
        :param on_retry: Called with the delay before the retry is attempted
        :return: True if the retry created the membership, False if the host
            should retry
        :raises BaseException: The original error for authentication failures
        """
        category = classify_error(error)

        if category == ErrorCategory.TRANSIENT:
            if on_retry:
                on_retry(self.delay_seconds)
            await asyncio.sleep(self.delay_seconds)
            try:
                response = await retry()
                if response.status_code == 204:
                    return True
                logger.warning(
                    f"Recovery attempt returned {response.status_code}, deferring to host"
                )
            except Exception as e:
                logger.error(f"Recovery attempt failed: {e}")

        if category == ErrorCategory.AUTHENTICATION:
            logger.error("Authentication error - operation cannot be retried")
            raise as_exception(error)

        return False
