"""
Request Processor - Service Layer

Standardizes the flow: request -> ResolvedOperation -> RequestContext -> HttpResult.
"""

import logging
from typing import Any, Callable, Optional, Tuple

from apirunner.config import RunnerOptions
from apirunner.core.exceptions import ControllerNotFoundError, Recognized, classify_error
from apirunner.core.materialize import json_to_stream, result_to_http_response
from apirunner.core.request_context import clear_request_id, generate_request_id, get_request_id
from apirunner.core.utils import maybe_await
from apirunner.models.context import RequestContext
from apirunner.models.operation import ApiInterface
from apirunner.models.result import HttpResult
from apirunner.services.controller_invoker import invoke_controller
from apirunner.services.plugin_runner import (
    POST_CONTROLLER,
    POST_SECURITY,
    run_plugin_hook,
    run_pre_controller,
)
from apirunner.services.response_validator import validate_response
from apirunner.services.security_evaluator import handle_security

logger = logging.getLogger("apirunner.processor")

ContextFactory = Callable[[Any, Any, Any, Any], RequestContext]


def _request_target(req: Any) -> Tuple[str, str]:
    method = getattr(req, "method", None) or "get"
    url = getattr(req, "url", None)
    if url is None:
        return method, "/"
    if isinstance(url, str):
        return method, url or "/"
    # starlette.datastructures.URL and friends
    target = getattr(url, "path", None) or "/"
    query = getattr(url, "query", None)
    if query:
        target = f"{target}?{query}"
    return method, target


def handle_error(err: BaseException) -> HttpResult:
    """
    Render a recognized failure as a JSON HttpResult; re-raise anything else.
    """
    classification = classify_error(err)
    if isinstance(classification, Recognized):
        return HttpResult(
            status=classification.status,
            headers={"content-type": "application/json"},
            body=json_to_stream(classification.payload),
        )
    logger.error(f"Unhandled error while dispatching request: {err}", exc_info=err)
    raise err


class Runner:
    """
    Orchestrates the request processing lifecycle.

    One call runs one request through resolve, security, plugins, parsing,
    the controller, response validation and materialization. Every stage
    after security is skipped once the response is finished.
    """

    def __init__(
        self,
        api: ApiInterface,
        options: Optional[RunnerOptions] = None,
        context_factory: ContextFactory = RequestContext,
    ):
        self.api = api
        self.options = options or RunnerOptions()
        self.plugins = list(self.options.plugins)
        self.context_factory = context_factory

    async def __call__(self, req: Any, res: Any) -> Optional[HttpResult]:
        return await self.handle(req, res)

    async def handle(self, req: Any, res: Any) -> Optional[HttpResult]:
        """
        Handle one request.

        Returns:
            HttpResult, or None when no route matched.
        """
        owns_request_id = get_request_id() is None
        if owns_request_id:
            generate_request_id()

        try:
            return await self._dispatch(req, res)
        except Exception as e:
            if not self.options.auto_handle_http_errors:
                raise
            return handle_error(e)
        finally:
            if owns_request_id:
                clear_request_id()

    async def _dispatch(self, req: Any, res: Any) -> Optional[HttpResult]:
        method, url = _request_target(req)
        headers = getattr(req, "headers", None) or {}

        resolved = await maybe_await(self.api.resolve(method, url, headers))
        if not resolved or not resolved.operation:
            logger.debug(f"No operation resolved for {method} {url}")
            return None

        operation = resolved.operation
        if not operation.controller or (
            isinstance(operation.controller, str) and not operation.controller_module
        ):
            raise ControllerNotFoundError(method, url)

        context = self.context_factory(req, res, resolved.api, operation)
        await handle_security(operation, context)

        await run_plugin_hook(self.plugins, POST_SECURITY, context)
        await run_pre_controller(self.plugins, context)

        if not context.is_response_finished():
            # Fill in context.params and context.body.
            await context.get_params()
            await context.get_body()

        controller_result = None
        if not context.is_response_finished():
            controller_result = await invoke_controller(
                operation.controller_module, operation.controller, context
            )
            await run_plugin_hook(self.plugins, POST_CONTROLLER, context)

        if not context.is_response_finished():
            await validate_response(
                operation,
                context,
                self.options.on_response_validation_error,
                self.options.validate_default_responses,
            )
        else:
            logger.debug(f"Response finished early for {method} {url}")

        if getattr(context.orig_res, "headers_sent", False):
            return None
        return result_to_http_response(context, context.res.body or controller_result)


def generate_runner(api: ApiInterface, options: Optional[RunnerOptions] = None) -> Runner:
    """
    Returns a runner which handles incoming HTTP requests.

    ``await runner(req, res)`` yields an HttpResult, or None when the request
    did not match any operation.
    """
    return Runner(api, options)
