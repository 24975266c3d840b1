"""
Custom exception classes and error classification.

Represent errors raised while dispatching a request, and decide which of
them can be rendered as an HTTP response.
"""

import logging
from typing import Any, Dict, List, NamedTuple, Optional, Union

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class RunnerError(Exception):
    """Base exception class for the dispatch pipeline."""

    pass


class HttpError(RunnerError):
    """Failure carrying an HTTP status, raised by controllers, plugins or authenticators."""

    def __init__(self, status: int, message: str):
        self.status = status
        self.message = message
        super().__init__(message)


class ValidationError(HttpError):
    """Raised when request or response data fails validation."""

    def __init__(self, errors: List[Any], status: int = 400, message: str = "Validation errors"):
        self.errors = list(errors)
        super().__init__(status, message)


class ControllerNotFoundError(RunnerError):
    """Raised when a resolved operation has no controller wired to it."""

    def __init__(self, method: str, url: str):
        self.method = method
        self.url = url
        super().__init__(f"No controller found for {method} {url}")


# ===========================================
# Classification
# ===========================================


class Recognized(NamedTuple):
    """A failure that maps onto an HTTP status and JSON payload."""

    status: int
    payload: Dict[str, Any]


class Unrecognized(NamedTuple):
    """A failure with no safe HTTP status; it must be re-raised."""

    error: BaseException


ErrorClassification = Union[Recognized, Unrecognized]


def _status_of(exc: BaseException) -> Optional[int]:
    value = getattr(exc, "status", None)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


def _serialize_issue(issue: Any) -> Any:
    if issue is None or isinstance(issue, (str, int, float, bool)):
        return issue
    if isinstance(issue, dict):
        return {str(k): _serialize_issue(v) for k, v in issue.items()}
    if isinstance(issue, (list, tuple)):
        return [_serialize_issue(item) for item in issue]
    if hasattr(issue, "model_dump"):
        return issue.model_dump(mode="json", exclude_none=True)
    if hasattr(issue, "__dict__"):
        return {k: _serialize_issue(v) for k, v in vars(issue).items() if not k.startswith("_")}
    # anything else renders as its string form
    return str(issue)


def classify_error(exc: BaseException) -> ErrorClassification:
    """
    Classify a pipeline failure.

    Validation failures and anything carrying an integer ``status`` are
    recognized; everything else (misconfiguration included) is not.
    """
    status_code = _status_of(exc)
    if isinstance(exc, ValidationError):
        return Recognized(
            status=status_code or 400,
            payload={
                "message": "Validation errors",
                "errors": [_serialize_issue(issue) for issue in exc.errors],
            },
        )
    if status_code is not None:
        message = getattr(exc, "message", None) or str(exc)
        return Recognized(status=status_code, payload={"message": message})
    return Unrecognized(error=exc)


def ensure_status(exc: BaseException, default: int = 500) -> BaseException:
    """Give a failure a status code if it doesn't already carry one."""
    if not getattr(exc, "status", None):
        exc.status = default  # type: ignore[attr-defined]
    return exc


# ===========================================
# Exception Handlers
# ===========================================


async def global_exception_handler(request: Request, exc: Exception):
    """
    Catch-all handler for unhandled exceptions.
    """
    error_detail = str(exc)
    logger.error(
        f"Global exception handler caught: {exc}",
        exc_info=True,
        extra={
            "path": request.url.path,
            "method": request.method,
        },
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal Server Error", "detail": error_detail},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Handler for HTTPException.
    """
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail})
