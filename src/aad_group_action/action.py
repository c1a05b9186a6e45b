"""Add a user to an Azure AD group through Microsoft Graph.

The host job framework drives the action through three entry points:

- :meth:`AddUserToGroupAction.invoke` performs the membership request
- :meth:`AddUserToGroupAction.error` recovers from a failed invocation
- :meth:`AddUserToGroupAction.halt` reports a cancelled invocation

Each takes the host's parameter and context mappings and returns a
JSON-serializable outcome mapping. Module-level :func:`invoke`,
:func:`error` and :func:`halt` delegate to a default instance.
"""

import logging
from typing import Any, Dict, Mapping, Optional, Tuple

import httpx
from pydantic import ValidationError as PydanticValidationError

from .auth import AuthorizationResolver
from .config import ActionSettings, get_settings
from .exceptions import ValidationError
from .graph import add_user_to_group, classify_response, resolve_base_url
from .models import (
    ExecutionContext,
    InvocationParams,
    Outcome,
    OutcomeStatus,
    utc_timestamp,
)
from .observability import ActionObserver, LoggingObserver, notify
from .recovery import OneShotRetryPolicy, error_message
from .utils.http import create_http_client
from .utils.security import setup_secure_logging
from .utils.templates import resolve_templates

logger = logging.getLogger(__name__)


class AddUserToGroupAction:
    """Group-membership action bound to settings, an observer and a transport.

    :param settings: Ambient settings; loaded from the environment if omitted
    :type settings: Optional[ActionSettings]
    :param observer: Lifecycle observer; defaults to :class:`LoggingObserver`
    :type observer: Optional[ActionObserver]
    :param transport: httpx transport override for outbound calls
    :type transport: Optional[httpx.AsyncBaseTransport]
    :param resolver: Authorization resolver; defaults to registered providers
    :type resolver: Optional[AuthorizationResolver]
    """

    def __init__(
        self,
        settings: Optional[ActionSettings] = None,
        observer: Optional[ActionObserver] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        resolver: Optional[AuthorizationResolver] = None,
    ):
        self.settings = settings or get_settings()
        self.observer = observer or LoggingObserver()
        self.transport = transport
        self.resolver = resolver or AuthorizationResolver()
        self.recovery_policy = OneShotRetryPolicy(self.settings.recovery_delay_seconds)

    @staticmethod
    def _parse(params: Mapping[str, Any]) -> InvocationParams:
        try:
            return InvocationParams.model_validate(params)
        except PydanticValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"]) or None
            raise ValidationError(
                f"Invalid parameter {field or 'mapping'}: {first['msg']}", field=field
            ) from e

    @staticmethod
    def _require(params: InvocationParams) -> Tuple[str, str]:
        if not params.userPrincipalName:
            raise ValidationError("userPrincipalName is required", field="userPrincipalName")
        if not params.groupId:
            raise ValidationError("groupId is required", field="groupId")
        return params.userPrincipalName, params.groupId

    async def _send(
        self, params: InvocationParams, context: ExecutionContext
    ) -> Tuple[httpx.Response, str]:
        """Resolve address and credentials, then POST the membership reference."""
        base_url = resolve_base_url(
            params, context, legacy_variable=self.settings.legacy_address_variable
        )
        async with create_http_client(self.settings, transport=self.transport) as client:
            headers = await self.resolver.create_auth_headers(context, client)
            response = await add_user_to_group(
                client, params.userPrincipalName, params.groupId, base_url, headers
            )
        return response, base_url

    async def invoke(
        self, params: Optional[Mapping[str, Any]], context: Optional[Mapping[str, Any]]
    ) -> Dict[str, Any]:
        """Add the user to the group.

        :param params: ``userPrincipalName``, ``groupId`` and optional ``address``
        :param context: ``environment``, ``secrets`` and optional ``data``
        :return: Success outcome; ``added`` is False if already a member
        :raises ActionError: For configuration errors and failed requests
        :raises httpx.HTTPError: For network failures
        """
        ctx = ExecutionContext.from_mapping(context)
        resolved, errors = resolve_templates(params or {}, ctx.data)
        if errors:
            logger.warning(f"Template resolution errors: {errors}")
        request = self._parse(resolved)

        notify(self.observer, "on_start", "invoke", request.userPrincipalName, request.groupId)
        try:
            user_principal_name, group_id = self._require(request)
            response, base_url = await self._send(request, ctx)
            outcome = classify_response(response, user_principal_name, group_id)
        except Exception as e:
            notify(
                self.observer,
                "on_failure",
                "invoke",
                e,
                request.userPrincipalName,
                request.groupId,
            )
            raise

        outcome = outcome.model_copy(update={"address": base_url})
        notify(self.observer, "on_success", "invoke", outcome)
        return outcome.to_dict()

    async def error(
        self, params: Optional[Mapping[str, Any]], context: Optional[Mapping[str, Any]]
    ) -> Dict[str, Any]:
        """Recover from a failed invocation.

        Transient failures are retried once after the configured delay;
        authentication failures are re-raised; anything else is handed back
        to the host with a ``retry_requested`` outcome.

        :param params: Original parameters plus the triggering ``error``
        :param context: Execution context of the original invocation
        :return: ``recovered`` or ``retry_requested`` outcome
        """
        params = params or {}
        failure = params.get("error")
        ctx = ExecutionContext.from_mapping(context)
        request = self._parse(params)
        logger.error(
            f"Add user to group encountered error for user {request.userPrincipalName} "
            f"and group {request.groupId}: {error_message(failure)}"
        )

        sent: Dict[str, str] = {}

        async def retry() -> httpx.Response:
            self._require(request)
            response, sent["address"] = await self._send(request, ctx)
            return response

        def on_retry(delay_seconds: float) -> None:
            notify(
                self.observer,
                "on_retry_attempt",
                request.userPrincipalName,
                request.groupId,
                delay_seconds,
            )

        recovered = await self.recovery_policy.recover(failure, retry, on_retry)
        if recovered:
            outcome = Outcome(
                status=OutcomeStatus.RECOVERED,
                userPrincipalName=request.userPrincipalName,
                groupId=request.groupId,
                added=True,
                address=sent.get("address"),
            )
            notify(self.observer, "on_success", "error", outcome)
            return outcome.to_dict()

        return Outcome(
            status=OutcomeStatus.RETRY_REQUESTED,
            userPrincipalName=request.userPrincipalName,
            groupId=request.groupId,
        ).to_dict()

    async def halt(
        self, params: Optional[Mapping[str, Any]], context: Optional[Mapping[str, Any]]
    ) -> Dict[str, Any]:
        """Report a halted invocation; never calls the network and never fails."""
        try:
            params = params or {}
            reason = params.get("reason")
            outcome = Outcome(
                status=OutcomeStatus.HALTED,
                userPrincipalName=str(params.get("userPrincipalName") or "unknown"),
                groupId=str(params.get("groupId") or "unknown"),
                reason=None if reason is None else str(reason),
                halted_at=utc_timestamp(),
            )
        except Exception as e:
            logger.warning(f"Unreadable halt parameters, reporting unknown identifiers: {e}")
            outcome = Outcome(
                status=OutcomeStatus.HALTED,
                userPrincipalName="unknown",
                groupId="unknown",
                halted_at=utc_timestamp(),
            )
        notify(self.observer, "on_halt", outcome)
        return outcome.to_dict()


_default_action: Optional[AddUserToGroupAction] = None


def get_default_action() -> AddUserToGroupAction:
    """Return the shared action instance, configuring logging on first use."""
    global _default_action
    if _default_action is None:
        settings = get_settings()
        setup_secure_logging(settings.log_level)
        _default_action = AddUserToGroupAction(settings=settings)
    return _default_action


async def invoke(params: Mapping[str, Any], context: Mapping[str, Any]) -> Dict[str, Any]:
    """Host entry point for normal execution."""
    return await get_default_action().invoke(params, context)


async def error(params: Mapping[str, Any], context: Mapping[str, Any]) -> Dict[str, Any]:
    """Host entry point for error recovery."""
    return await get_default_action().error(params, context)


async def halt(params: Mapping[str, Any], context: Mapping[str, Any]) -> Dict[str, Any]:
    """Host entry point for halt/cleanup."""
    return await get_default_action().halt(params, context)
