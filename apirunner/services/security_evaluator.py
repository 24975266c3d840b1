"""
Security evaluation stage.

Runs the operation's authenticate() and records the outcome on the context.
"""

import logging
from typing import Any

from apirunner.core.utils import maybe_await
from apirunner.models.context import RequestContext
from apirunner.models.operation import ResolvedOperation

logger = logging.getLogger("apirunner.security")


def _user_of(auth_info: Any) -> Any:
    if isinstance(auth_info, dict):
        return auth_info.get("user")
    return getattr(auth_info, "user", None)


async def handle_security(operation: ResolvedOperation, context: RequestContext) -> None:
    """
    Authenticate the request.

    The raw result is stored on ``context.security``. ``context.user`` is only
    filled in when exactly one scheme matched; with several it stays unset.
    """
    authenticated = await maybe_await(operation.authenticate(context))
    context.security = authenticated

    if authenticated:
        matched_schemes = list(authenticated.keys())
        if len(matched_schemes) == 1:
            context.user = _user_of(authenticated[matched_schemes[0]])
        else:
            logger.debug(f"Multiple security schemes matched: {matched_schemes}")
