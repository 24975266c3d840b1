"""
Plugin hook runner.

Plugins are arbitrary objects; each hook is an optional method receiving
the request context.
"""

from typing import Any, Sequence

from apirunner.core.utils import maybe_await
from apirunner.models.context import RequestContext

POST_SECURITY = "post_security"
PRE_CONTROLLER = "pre_controller"
POST_CONTROLLER = "post_controller"


async def run_plugin_hook(plugins: Sequence[Any], hook_name: str, context: RequestContext) -> None:
    """
    Run ``hook_name`` on each plugin, in order, until the response is finished.
    """
    for plugin in plugins:
        hook = getattr(plugin, hook_name, None)
        if not context.is_response_finished() and hook is not None:
            await maybe_await(hook(context))


async def run_pre_controller(plugins: Sequence[Any], context: RequestContext) -> None:
    await run_plugin_hook(plugins, PRE_CONTROLLER, context)
