"""
Resolved operation models.

Describe what the routing collaborator hands back to the runner.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict


class ValidationIssue(BaseModel):
    """A single validation problem reported by a schema validator."""

    model_config = ConfigDict(extra="allow")

    message: str = ""
    location: Optional[Any] = None


class ResponseValidationResult(BaseModel):
    """Outcome of checking a response against its declared contract."""

    errors: Optional[List[ValidationIssue]] = None


def _no_authentication(context: Any) -> None:
    return None


def _no_response_validation(response: Any, validate_defaults: bool) -> ResponseValidationResult:
    return ResponseValidationResult()


async def _noop_parser(context: Any) -> None:
    return None


class ResolvedOperation(BaseModel):
    """
    Operation selected for a request.

    Every callable may be a plain function or a coroutine function.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    controller_module: Optional[Any] = None
    controller: Optional[Any] = None
    authenticate: Callable[..., Any] = _no_authentication
    validate_response: Callable[..., Any] = _no_response_validation
    parse_parameters: Callable[..., Any] = _noop_parser
    parse_body: Callable[..., Any] = _noop_parser
    operation_id: Optional[str] = None


class ResolvedRoute(BaseModel):
    """Result of routing a method, path and headers triple."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    api: Any = None
    operation: Optional[ResolvedOperation] = None


class ApiInterface(ABC):
    """Routing collaborator consumed by the runner."""

    @abstractmethod
    def resolve(
        self, method: str, path: str, headers: Mapping[str, str]
    ) -> Optional[ResolvedRoute]:
        """
        Resolve a request to an operation, or None when nothing matches.
        """
        pass
