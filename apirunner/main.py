"""
API Runner - FastAPI adapter

Hands every incoming request to the dispatch runner and streams the
resulting HttpResult back to the client.
"""

import logging
from typing import Any, AsyncIterator, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import Response, StreamingResponse

from apirunner.api.deps import RunnerDep
from apirunner.config import RunnerOptions, config
from apirunner.core.logging_config import setup_logging
from apirunner.exceptions import register_exception_handlers
from apirunner.middleware import request_id_middleware
from apirunner.models.context import RawResponse
from apirunner.models.operation import ApiInterface
from apirunner.models.result import HttpResult
from apirunner.services.processor import Runner

# Logger setup
setup_logging(config.LOG_CONFIG_PATH)
logger = logging.getLogger("apirunner.main")

HTTP_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]
CHUNK_SIZE = 64 * 1024


async def iter_body(body: Any) -> AsyncIterator[bytes]:
    """Adapt a materialized body (async iterator or file-like) to ASGI chunks."""
    if hasattr(body, "__aiter__"):
        async for chunk in body:
            yield chunk.encode("utf-8") if isinstance(chunk, str) else chunk
        return

    while True:
        chunk = body.read(CHUNK_SIZE)
        if not chunk:
            break
        yield chunk.encode("utf-8") if isinstance(chunk, str) else chunk


def to_response(result: HttpResult) -> Response:
    if result.body is None:
        return Response(status_code=result.status, headers=result.headers)
    return StreamingResponse(
        iter_body(result.body), status_code=result.status, headers=result.headers
    )


def create_app(api: ApiInterface, options: Optional[RunnerOptions] = None) -> FastAPI:
    """
    Build a FastAPI application serving ``api`` through a Runner.

    Options default to the environment settings.
    """
    app = FastAPI(title="API Runner", version="1.0.0", root_path=config.root_path)
    app.state.runner = Runner(api, options or RunnerOptions.from_config(config))

    app.middleware("http")(request_id_middleware)
    register_exception_handlers(app)

    @app.api_route("/{full_path:path}", methods=HTTP_METHODS, include_in_schema=False)
    async def dispatch(request: Request, runner: RunnerDep):
        result = await runner(request, RawResponse())
        if result is None:
            raise HTTPException(status_code=404, detail="Not Found")
        return to_response(result)

    logger.info("Runner application initialized.")
    return app
