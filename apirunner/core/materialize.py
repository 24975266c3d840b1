"""
Response materialization.

Converts a controller's return value into an HttpResult.
"""

import io
import json
from typing import Any, Dict

from apirunner.models.context import RequestContext
from apirunner.models.result import HttpResult
from apirunner.core.utils import is_readable


def _json_default(value: Any) -> Any:
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json")
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def string_to_stream(text: str, encoding: str = "utf-8") -> io.BytesIO:
    return io.BytesIO(text.encode(encoding))


def json_to_stream(value: Any) -> io.BytesIO:
    return string_to_stream(json.dumps(value, default=_json_default))


def result_to_http_response(context: RequestContext, result: Any) -> HttpResult:
    """
    Build the final HttpResult from the context's response state.

    Candidate body handling, in priority order:
        falsy -> no body
        bytes -> byte stream, verbatim
        str -> UTF-8 byte stream
        readable (file-like / async iterator) -> passed through
        anything else -> JSON, setting content-type if unset
    """
    output = None
    # Controllers may write context.res.headers directly, bypassing set_header().
    headers: Dict[str, str] = {name.lower(): value for name, value in context.res.headers.items()}
    context.res.headers = headers

    if result:
        if isinstance(result, (bytes, bytearray, memoryview)):
            output = io.BytesIO(bytes(result))
        elif isinstance(result, str):
            output = string_to_stream(result)
        elif is_readable(result):
            output = result
        else:
            if not headers.get("content-type"):
                headers["content-type"] = "application/json"
            output = json_to_stream(result)

    return HttpResult(status=context.res.status_code, headers=headers, body=output)
