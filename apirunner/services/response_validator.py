"""
Response validation stage.
"""

import logging
from typing import Any, Callable, Mapping, Optional

from apirunner.core.exceptions import ensure_status
from apirunner.core.utils import maybe_await
from apirunner.models.context import RequestContext
from apirunner.models.operation import ResolvedOperation

logger = logging.getLogger("apirunner.response_validator")


def validation_errors(result: Any) -> Any:
    """Read the issue list from a validator result (mapping or object)."""
    if result is None:
        return None
    if isinstance(result, Mapping):
        return result.get("errors")
    return getattr(result, "errors", None)


async def validate_response(
    operation: ResolvedOperation,
    context: RequestContext,
    callback: Optional[Callable[[Any], Any]],
    validate_defaults: bool,
) -> Any:
    """
    Check the context's response against the operation's response contract.

    The response is only observed. When issues are found ``callback`` is
    invoked once with the validator's result, exactly as the validator
    returned it; a failing callback is re-raised with a status (500 unless
    it carries one).

    Returns:
        The validation result, or None when no callback is configured.
    """
    if callback is None:
        return None

    result = await maybe_await(operation.validate_response(context.res, validate_defaults))
    errors = validation_errors(result)

    if errors:
        logger.warning(
            f"Response failed validation with {len(errors)} error(s)",
            extra={"operation_id": operation.operation_id, "status": context.res.status_code},
        )
        try:
            await maybe_await(callback(result))
        except Exception as e:
            ensure_status(e, 500)
            raise

    return result
