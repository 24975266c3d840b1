"""
Authentication and security module.

Generates and verifies JWT tokens, and provides the per-scheme
authenticators an operation's authenticate() is composed from.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence

import jwt
from pydantic import BaseModel, Field

from apirunner.core.exceptions import HttpError
from apirunner.core.utils import maybe_await

logger = logging.getLogger(__name__)

# JWT algorithm.
ALGORITHM = "HS256"


class AuthInfo(BaseModel):
    """Result of a successful scheme authentication."""

    type: str = "success"
    user: Any = None
    scopes: List[str] = Field(default_factory=list)


def create_access_token(
    username: str,
    secret_key: str,
    expires_delta: Optional[int] = None,
    scopes: Optional[Sequence[str]] = None,
) -> str:
    """
    Issue an HS256 JWT for ``username``.

    ``expires_delta`` (seconds) defaults to the JWT_EXPIRES_DELTA setting;
    ``scopes`` are carried in the ``scope`` claim, space separated.
    """
    if expires_delta is None:
        from apirunner.config import config

        expires_delta = config.JWT_EXPIRES_DELTA

    issued_at = datetime.now(timezone.utc)
    claims: Dict[str, Any] = {
        "sub": username,
        "iat": issued_at,
        "exp": issued_at + timedelta(seconds=expires_delta),
    }
    if scopes:
        claims["scope"] = " ".join(scopes)
    return jwt.encode(claims, secret_key, algorithm=ALGORITHM)


def decode_token(authorization: str, secret_key: str) -> Optional[Dict[str, Any]]:
    """
    Decode a bare token or an ``Authorization: Bearer`` value.

    Returns the claims, or None when the scheme is not Bearer, the token is
    expired or malformed, or the signature does not match.
    """
    token = authorization.strip()
    scheme, _, credentials = token.partition(" ")
    if credentials:
        if scheme.lower() != "bearer":
            return None
        token = credentials.strip()

    try:
        claims = jwt.decode(token, secret_key, algorithms=[ALGORITHM])
    except jwt.PyJWTError as e:
        logger.debug(f"Rejected bearer token: {e}")
        return None
    return claims if claims.get("sub") else None


def verify_token(token: str, secret_key: str) -> Optional[str]:
    """Return the token's subject, or None if it does not verify."""
    claims = decode_token(token, secret_key)
    return claims["sub"] if claims else None


def _request_headers(context: Any) -> Mapping[str, str]:
    return getattr(context.req, "headers", None) or {}


class BearerTokenAuthenticator:
    """Authenticates `Authorization: Bearer <jwt>` headers."""

    def __init__(self, secret_key: str):
        self.secret_key = secret_key

    async def __call__(self, context: Any) -> Optional[AuthInfo]:
        authorization = _request_headers(context).get("authorization")
        if not authorization:
            return None

        claims = decode_token(authorization, self.secret_key)
        if not claims:
            return None
        return AuthInfo(user=claims["sub"], scopes=claims.get("scope", "").split())


class ApiKeyAuthenticator:
    """Authenticates a static API key sent in a request header."""

    def __init__(self, keys: Mapping[str, Any], header: str = "x-api-key"):
        # keys maps each accepted key to the user it identifies
        self.keys = dict(keys)
        self.header = header.lower()

    async def __call__(self, context: Any) -> Optional[AuthInfo]:
        key = _request_headers(context).get(self.header)
        if not key or key not in self.keys:
            return None
        return AuthInfo(user=self.keys[key])


BEARER_SCHEME = "bearer"
API_KEY_SCHEME = "apiKey"


def authenticators_from_config(
    settings: Any, api_keys: Optional[Mapping[str, Any]] = None
) -> Dict[str, Callable[..., Any]]:
    """
    Build the scheme registry passed to build_authenticate() from settings.

    ``bearer`` is registered when JWT_SECRET_KEY is set; ``apiKey`` when
    ``api_keys`` are given, read from the API_KEY_HEADER header.
    """
    authenticators: Dict[str, Callable[..., Any]] = {}
    if settings.JWT_SECRET_KEY:
        authenticators[BEARER_SCHEME] = BearerTokenAuthenticator(settings.JWT_SECRET_KEY)
    if api_keys:
        authenticators[API_KEY_SCHEME] = ApiKeyAuthenticator(
            api_keys, header=settings.API_KEY_HEADER
        )
    return authenticators


def build_authenticate(
    authenticators: Mapping[str, Callable[..., Any]],
    requirements: Sequence[Iterable[str]],
) -> Callable[[Any], Any]:
    """
    Compose scheme authenticators into an operation's authenticate().

    Each requirement lists schemes that must all succeed. The first satisfied
    requirement wins and its {scheme: AuthInfo} mapping is returned.

    Raises:
        HttpError: 401 when requirements exist but none is satisfied
    """
    requirements = [list(requirement) for requirement in requirements]
    for requirement in requirements:
        for scheme in requirement:
            if scheme not in authenticators:
                raise KeyError(f"No authenticator registered for security scheme {scheme}")

    async def authenticate(context: Any) -> Optional[Dict[str, Any]]:
        if not requirements:
            return None

        for requirement in requirements:
            matched: Dict[str, Any] = {}
            for scheme in requirement:
                info = await maybe_await(authenticators[scheme](context))
                if not info:
                    break
                matched[scheme] = info
            else:
                return matched

        schemes = sorted({scheme for requirement in requirements for scheme in requirement})
        logger.debug("Authentication failed", extra={"schemes": schemes})
        raise HttpError(
            401, f"Must authenticate using one of the following schemes: {', '.join(schemes)}."
        )

    return authenticate
