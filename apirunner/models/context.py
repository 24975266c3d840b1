"""
Request context models.

Per-request mutable state threaded through every pipeline stage.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from apirunner.core.utils import maybe_await
from apirunner.models.operation import ResolvedOperation


@dataclass
class RawResponse:
    """Transport-level response handle; only ``headers_sent`` is consulted."""

    headers_sent: bool = False


@dataclass
class ResponseState:
    """
    Response being built for the request.

    Header names are stored lower-cased.
    """

    status_code: int = 200
    headers: Dict[str, str] = field(default_factory=dict)
    body: Any = None
    ended: bool = False

    def __post_init__(self):
        self.headers = {k.lower(): v for k, v in self.headers.items()}

    def set_status(self, status_code: int) -> "ResponseState":
        self.status_code = status_code
        return self

    def set_header(self, name: str, value: str) -> "ResponseState":
        self.headers[name.lower()] = value
        return self

    def set_body(self, body: Any) -> "ResponseState":
        self.body = body
        return self

    def json(self, value: Any) -> "ResponseState":
        self.set_header("content-type", "application/json")
        return self.set_body(value)

    def end(self) -> None:
        """Mark the response finished; later pipeline stages are skipped."""
        self.ended = True


class RequestContext:
    """
    Mutable state for one request's pipeline.

    Never shared across requests.
    """

    def __init__(self, req: Any, res: Any, api: Any, operation: ResolvedOperation):
        self.req = req
        self.orig_res = res
        self.res = ResponseState()
        self.api = api
        self.operation = operation
        self.params: Optional[Dict[str, Any]] = None
        self.body: Any = None
        self.security: Optional[Dict[str, Any]] = None
        self.user: Any = None
        self._body_parsed = False

    def is_response_finished(self) -> bool:
        return self.res.ended or bool(getattr(self.orig_res, "headers_sent", False))

    async def get_params(self) -> Dict[str, Any]:
        if self.params is None:
            self.params = await maybe_await(self.operation.parse_parameters(self)) or {}
        return self.params

    async def get_body(self) -> Any:
        if not self._body_parsed:
            self.body = await maybe_await(self.operation.parse_body(self))
            self._body_parsed = True
        return self.body
