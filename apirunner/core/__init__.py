"""
Core logic package.

Provides shared logic such as authentication, error classification and
response materialization helpers.
"""

from .exceptions import (
    ControllerNotFoundError,
    HttpError,
    Recognized,
    Unrecognized,
    ValidationError,
    classify_error,
)
from .security import (
    ApiKeyAuthenticator,
    AuthInfo,
    BearerTokenAuthenticator,
    authenticators_from_config,
    build_authenticate,
    create_access_token,
    decode_token,
    verify_token,
)
from .utils import is_readable, maybe_await

__all__ = [
    "ApiKeyAuthenticator",
    "AuthInfo",
    "BearerTokenAuthenticator",
    "ControllerNotFoundError",
    "HttpError",
    "Recognized",
    "Unrecognized",
    "ValidationError",
    "authenticators_from_config",
    "build_authenticate",
    "classify_error",
    "create_access_token",
    "decode_token",
    "is_readable",
    "maybe_await",
    "verify_token",
]
