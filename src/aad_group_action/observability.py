"""Lifecycle observers for the group-membership action.

The action reports start, success, failure, retry attempts and halts to an
injected observer. The default :class:`LoggingObserver` turns those events
into structured log records; observers never influence control flow.
"""

import logging
from typing import Any, Dict, Optional

from .exceptions import ActionError
from .models import Outcome

logger = logging.getLogger(__name__)


class ActionObserver:
    """No-op observer; subclass and override the events of interest."""

    def on_start(
        self,
        operation: str,
        user_principal_name: Optional[str],
        group_id: Optional[str],
    ) -> None:
        pass

    def on_success(self, operation: str, outcome: Outcome) -> None:
        pass

    def on_failure(
        self,
        operation: str,
        error: BaseException,
        user_principal_name: Optional[str],
        group_id: Optional[str],
    ) -> None:
        pass

    def on_retry_attempt(
        self,
        user_principal_name: Optional[str],
        group_id: Optional[str],
        delay_seconds: float,
    ) -> None:
        pass

    def on_halt(self, outcome: Outcome) -> None:
        pass


class LoggingObserver(ActionObserver):
    """Emit one structured log record per lifecycle event.

    Records carry ``event``, ``user_principal_name``, ``group_id`` and, where
    known, ``status`` and ``category`` in their ``extra`` fields.
    """

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger

    @staticmethod
    def _extra(event: str, user_principal_name, group_id, **fields: Any) -> Dict[str, Any]:
        extra = {
            "event": event,
            "user_principal_name": user_principal_name,
            "group_id": group_id,
        }
        extra.update(fields)
        return extra

    def on_start(self, operation, user_principal_name, group_id):
        self.log.info(
            f"Starting {operation}: adding user {user_principal_name} to group {group_id}",
            extra=self._extra("start", user_principal_name, group_id, operation=operation),
        )

    def on_success(self, operation, outcome):
        if outcome.added:
            text = f"Added user {outcome.userPrincipalName} to group {outcome.groupId}"
        else:
            text = (
                f"User {outcome.userPrincipalName} is already a member of group "
                f"{outcome.groupId}"
            )
        self.log.info(
            f"{operation}: {text}",
            extra=self._extra(
                "success",
                outcome.userPrincipalName,
                outcome.groupId,
                operation=operation,
                status=outcome.status.value,
            ),
        )

    def on_failure(self, operation, error, user_principal_name, group_id):
        category = error.category.value if isinstance(error, ActionError) else None
        self.log.error(
            f"{operation} failed for user {user_principal_name} and group {group_id}: {error}",
            extra=self._extra(
                "failure",
                user_principal_name,
                group_id,
                operation=operation,
                category=category,
            ),
        )

    def on_retry_attempt(self, user_principal_name, group_id, delay_seconds):
        self.log.warning(
            f"Retryable error detected, retrying once in {delay_seconds:.1f}s",
            extra=self._extra(
                "retry_attempt", user_principal_name, group_id, delay_seconds=delay_seconds
            ),
        )

    def on_halt(self, outcome):
        self.log.info(
            f"Add user to group operation halted: {outcome.reason}",
            extra=self._extra(
                "halt",
                outcome.userPrincipalName,
                outcome.groupId,
                status=outcome.status.value,
                reason=outcome.reason,
            ),
        )


def notify(observer: ActionObserver, event: str, *args: Any) -> None:
    """Call an observer hook, logging and discarding anything it raises."""
    try:
        getattr(observer, event)(*args)
    except Exception as e:
        logger.warning(f"Observer {type(observer).__name__}.{event} raised: {e}")
