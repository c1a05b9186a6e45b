"""Configuration settings for the group-membership action.

These settings tune the action's own behaviour (timeouts, recovery delay,
logging) and are loaded from the process environment or a .env file. The
host-supplied ``environment`` and ``secrets`` maps are separate and are
never read from here.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ActionSettings(BaseSettings):
    """Ambient settings loaded from ``AAD_ACTION_*`` environment variables.

    :param recovery_delay_seconds: Fixed wait before the one-shot local retry
    :type recovery_delay_seconds: float
    :param request_timeout_seconds: Read/write timeout for outbound calls
    :type request_timeout_seconds: float
    :param connect_timeout_seconds: Connect timeout for outbound calls
    :type connect_timeout_seconds: float
    :param legacy_address_variable: Environment key consulted after ADDRESS
    :type legacy_address_variable: str
    :param log_level: Logging level for the action
    :type log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    """

    model_config = SettingsConfigDict(
        env_prefix="AAD_ACTION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    recovery_delay_seconds: float = Field(
        5.0, ge=0, description="Delay before the local recovery retry"
    )
    request_timeout_seconds: float = Field(
        30.0, gt=0, description="Read/write timeout for outbound requests"
    )
    connect_timeout_seconds: float = Field(
        5.0, gt=0, description="Connect timeout for outbound requests"
    )
    legacy_address_variable: str = Field(
        "AZURE_AD_TENANT_URL",
        description="Legacy environment key for the API base URL",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        "INFO", description="Logging level"
    )


def get_settings() -> ActionSettings:
    """Load settings from the current process environment."""
    return ActionSettings()
