"""Structured exception classes for the group-membership action.

Every error raised by the action carries an explicit :class:`ErrorCategory`
so that the recovery handler can decide what to do without inspecting the
message text. Messages still embed the remote status code and response body
verbatim because the host framework matches on them for its own retries.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(str, Enum):
    """Categories of errors for recovery decisions.

    - configuration: missing parameters, address or credentials
    - authentication: remote 401/403
    - client: remote 400 (other than an existing membership)
    - transient: remote 429/502/503/504
    - unclassified: network failures and any other status
    """

    CONFIGURATION = "configuration"
    AUTHENTICATION = "authentication"
    CLIENT = "client"
    TRANSIENT = "transient"
    UNCLASSIFIED = "unclassified"


TRANSIENT_STATUS_CODES = (429, 502, 503, 504)
AUTHENTICATION_STATUS_CODES = (401, 403)


def categorize_status(status_code: Optional[int]) -> ErrorCategory:
    """Map an HTTP status code to an error category.

    :param status_code: HTTP status code, or None for non-HTTP failures
    :return: Matching error category
    """
    if status_code in TRANSIENT_STATUS_CODES:
        return ErrorCategory.TRANSIENT
    if status_code in AUTHENTICATION_STATUS_CODES:
        return ErrorCategory.AUTHENTICATION
    if status_code == 400:
        return ErrorCategory.CLIENT
    return ErrorCategory.UNCLASSIFIED


class ActionError(Exception):
    """Base exception for all action errors.

    :param message: Human-readable error message
    :param code: Optional error code for programmatic handling
    :param details: Optional dictionary containing additional error context
    """

    category: ErrorCategory = ErrorCategory.UNCLASSIFIED

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format.

        :return: Dictionary containing error code, category, message and details
        """
        return {
            "error": self.code,
            "category": self.category.value,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(ActionError):
    """Raised when address or authentication configuration is missing.

    :param message: Description of the configuration error
    :param setting: Optional name of the problematic setting
    """

    category = ErrorCategory.CONFIGURATION

    def __init__(self, message: str, setting: Optional[str] = None):
        details = {}
        if setting:
            details["setting"] = setting
        super().__init__(message=message, code="CONFIGURATION_ERROR", details=details)
        self.setting = setting


class ValidationError(ConfigurationError):
    """Raised when a required invocation parameter is missing.

    :param message: Description of the validation error
    :param field: Name of the parameter that failed validation
    """

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message=message)
        self.code = "VALIDATION_ERROR"
        self.field = field
        if field:
            self.details["field"] = field


class AuthenticationError(ActionError):
    """Raised when the remote system rejects the credentials.

    :param message: Description of the authentication failure
    :param details: Optional additional context about the failure
    """

    category = ErrorCategory.AUTHENTICATION

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="AUTHENTICATION_ERROR", details=details)


class TokenExchangeError(AuthenticationError):
    """Raised when the OAuth2 client-credentials exchange fails.

    :param message: Description of the failure
    :param status_code: HTTP status returned by the token endpoint, if any
    :param response_body: Response body returned by the token endpoint, if any
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
    ):
        details: Dict[str, Any] = {}
        if status_code:
            details["status_code"] = status_code
        if response_body:
            details["response_body"] = response_body
        super().__init__(message=message, details=details)
        self.code = "TOKEN_EXCHANGE_ERROR"
        self.status_code = status_code
        self.response_body = response_body

    @property
    def category(self) -> ErrorCategory:
        if categorize_status(self.status_code) == ErrorCategory.TRANSIENT:
            return ErrorCategory.TRANSIENT
        return ErrorCategory.AUTHENTICATION


class GraphAPIError(ActionError):
    """Raised when the membership request does not succeed.

    :param message: Description of the API error
    :param status_code: HTTP status code from the API response
    :param status_text: HTTP reason phrase from the API response
    :param response_body: Response body from the failed request
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        status_text: Optional[str] = None,
        response_body: Optional[str] = None,
    ):
        details: Dict[str, Any] = {}
        if status_code:
            details["status_code"] = status_code
        if status_text:
            details["status_text"] = status_text
        if response_body:
            details["response_body"] = response_body
        super().__init__(message=message, code="GRAPH_API_ERROR", details=details)
        self.status_code = status_code
        self.status_text = status_text
        self.response_body = response_body

    @property
    def category(self) -> ErrorCategory:
        return categorize_status(self.status_code)
