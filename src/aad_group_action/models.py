"""Pydantic models for the group-membership action.

The host framework hands the action plain mappings for parameters and
context and expects plain mappings back. These models give those payloads
a typed shape inside the action:

- Invocation parameters and execution context (inbound)
- Outcome records (outbound)
- OAuth2 client-credentials exchange configuration
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field


class InvocationParams(BaseModel):
    """Parameters supplied by the host for a single invocation.

    Identifiers are optional at the model level; the action raises its own
    parameter error for missing values before any network activity.

    :param userPrincipalName: User Principal Name of the user to add
    :type userPrincipalName: Optional[str]
    :param groupId: Identifier of the target group
    :type groupId: Optional[str]
    :param address: Optional override for the API base URL
    :type address: Optional[str]
    """

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    userPrincipalName: Optional[str] = None
    groupId: Optional[str] = None
    address: Optional[str] = None


def _settings_map(values: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    # unset entries arrive as None; treat them as absent
    return {key: str(value) for key, value in (values or {}).items() if value is not None}


class ExecutionContext(BaseModel):
    """Host-supplied context: configuration, credentials and job data."""

    model_config = ConfigDict(extra="ignore")

    environment: Dict[str, str] = Field(default_factory=dict)
    secrets: Dict[str, str] = Field(default_factory=dict)
    data: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_mapping(cls, context: Optional[Mapping[str, Any]]) -> "ExecutionContext":
        """Build a context from the host's mapping, tolerating None entries."""
        if isinstance(context, ExecutionContext):
            return context
        context = context or {}
        return cls(
            environment=_settings_map(context.get("environment")),
            secrets=_settings_map(context.get("secrets")),
            data=dict(context.get("data") or {}),
        )


class OutcomeStatus(str, Enum):
    """Fixed set of outcome statuses reported to the host."""

    SUCCESS = "success"
    FAILED = "failed"
    RECOVERED = "recovered"
    HALTED = "halted"
    RETRY_REQUESTED = "retry_requested"


class Outcome(BaseModel):
    """Record returned to the host for one invocation.

    ``added`` is True only when the remote system reports the membership
    was created by this call.
    """

    model_config = ConfigDict(coerce_numbers_to_str=True)

    status: OutcomeStatus
    userPrincipalName: Optional[str] = None
    groupId: Optional[str] = None
    added: Optional[bool] = None
    message: Optional[str] = None
    address: Optional[str] = None
    reason: Optional[str] = None
    halted_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable mapping without unset fields."""
        return self.model_dump(mode="json", exclude_none=True)


class ClientCredentialsConfig(BaseModel):
    """Configuration for the OAuth2 client-credentials token exchange.

    ``auth_style`` selects how the client credentials are sent: "InParams"
    puts them in the form body; anything else uses HTTP Basic.
    """

    token_url: str
    client_id: str
    client_secret: str
    scope: Optional[str] = None
    audience: Optional[str] = None
    auth_style: Optional[str] = None

    @property
    def credentials_in_params(self) -> bool:
        return self.auth_style == "InParams"


def utc_timestamp() -> str:
    """Return the current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
