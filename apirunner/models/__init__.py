"""
Data model definitions package.

Aggregates the models shared by the runner and its collaborators.
"""

from .context import RawResponse, RequestContext, ResponseState
from .operation import (
    ApiInterface,
    ResolvedOperation,
    ResolvedRoute,
    ResponseValidationResult,
    ValidationIssue,
)
from .result import HttpResult

__all__ = [
    "ApiInterface",
    "HttpResult",
    "RawResponse",
    "RequestContext",
    "ResolvedOperation",
    "ResolvedRoute",
    "ResponseState",
    "ResponseValidationResult",
    "ValidationIssue",
]
