"""Interpret the membership response.

- 204: the user was added
- 400 mentioning an existing membership: success, nothing added
- 400 otherwise: client error carrying the response body
- anything else: error carrying status code, reason phrase and body
"""

import httpx

from ..exceptions import GraphAPIError
from ..models import Outcome, OutcomeStatus

ALREADY_MEMBER_SIGNATURE = "already a member"
ALREADY_MEMBER_MESSAGE = "User is already a member of the group"


def classify_response(
    response: httpx.Response, user_principal_name: str, group_id: str
) -> Outcome:
    """Map a membership response to an outcome.

    :param response: Response from the ``members/$ref`` POST
    :type response: httpx.Response
    :param user_principal_name: User identifier echoed into the outcome
    :type user_principal_name: str
    :param group_id: Group identifier echoed into the outcome
    :type group_id: str
    :return: Success outcome
    :rtype: Outcome
    :raises GraphAPIError: For every response that is not a success
    """
    if response.status_code == 204:
        return Outcome(
            status=OutcomeStatus.SUCCESS,
            userPrincipalName=user_principal_name,
            groupId=group_id,
            added=True,
        )

    error_text = response.text
    if response.status_code == 400:
        if ALREADY_MEMBER_SIGNATURE in error_text:
            return Outcome(
                status=OutcomeStatus.SUCCESS,
                userPrincipalName=user_principal_name,
                groupId=group_id,
                added=False,
                message=ALREADY_MEMBER_MESSAGE,
            )
        raise GraphAPIError(
            f"Bad request: {error_text}",
            status_code=400,
            status_text=response.reason_phrase,
            response_body=error_text,
        )

    raise GraphAPIError(
        f"Failed to add user to group: {response.status_code} "
        f"{response.reason_phrase} - {error_text}",
        status_code=response.status_code,
        status_text=response.reason_phrase,
        response_body=error_text,
    )
