"""Microsoft Graph group-membership request and response handling."""

from .classifier import ALREADY_MEMBER_MESSAGE, classify_response
from .membership import (
    GRAPH_RESOURCE_BASE,
    add_user_to_group,
    build_member_reference,
    build_member_url,
    encode_component,
    resolve_base_url,
)

__all__ = [
    "ALREADY_MEMBER_MESSAGE",
    "GRAPH_RESOURCE_BASE",
    "add_user_to_group",
    "build_member_reference",
    "build_member_url",
    "classify_response",
    "encode_component",
    "resolve_base_url",
]
