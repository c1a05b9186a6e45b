"""Configuration for the group-membership action."""

from .settings import ActionSettings, get_settings

__all__ = ["ActionSettings", "get_settings"]
