"""
Controller invocation.
"""

from typing import Any

from apirunner.core.utils import maybe_await
from apirunner.models.context import RequestContext


def resolve_controller(controller_module: Any, controller: Any) -> Any:
    """Controllers may be given directly or by name on their module."""
    if callable(controller):
        return controller
    if isinstance(controller, str):
        target = getattr(controller_module, controller, None)
        if callable(target):
            return target
    raise TypeError(f"Controller {controller!r} is not callable")


async def invoke_controller(controller_module: Any, controller: Any, context: RequestContext) -> Any:
    """
    Call the controller with the context and return its result untouched.
    """
    handler = resolve_controller(controller_module, controller)
    return await maybe_await(handler(context))
