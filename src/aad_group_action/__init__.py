"""Azure AD add-user-to-group action.

Adds a user to a group through the Microsoft Graph ``members/$ref``
endpoint. The host job framework calls the module-level :func:`invoke`,
:func:`error` and :func:`halt` coroutines with its parameter and context
mappings.

:var __version__: Current package version
:type __version__: str
"""

from .action import AddUserToGroupAction, error, halt, invoke

__version__ = "0.1.0"

__all__ = ["AddUserToGroupAction", "invoke", "error", "halt", "__version__"]
