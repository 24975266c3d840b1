"""
Runner configuration definition.

Loads configuration from environment variables and provides a Pydantic model.
Uses pydantic-settings for type safety and defaults.
"""

import sys
from typing import Any, Callable, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from apirunner.core.config import BaseAppConfig


class RunnerConfig(BaseAppConfig):
    """
    Configuration management for the runner service.
    """

    # Error policy
    AUTO_HANDLE_HTTP_ERRORS: bool = Field(
        default=True, description="Render validation/status-bearing errors as responses"
    )
    VALIDATE_DEFAULT_RESPONSES: bool = Field(
        default=True, description="Also validate against default response schemas"
    )

    # Authentication/security
    JWT_SECRET_KEY: Optional[str] = Field(
        default=None, min_length=32, description="JWT signing secret key"
    )
    JWT_EXPIRES_DELTA: int = Field(default=3000, description="Token expiry (seconds)")
    API_KEY_HEADER: str = Field(default="x-api-key", description="Header carrying API keys")

    # FastAPI settings
    root_path: str = Field(default="", description="API root path (for proxy)")


class RunnerOptions(BaseModel):
    """
    Options for a single runner instance.

    Plugins and the validation callback are application objects, so they are
    passed in code rather than read from the environment.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    auto_handle_http_errors: bool = True
    plugins: List[Any] = Field(default_factory=list)
    on_response_validation_error: Optional[Callable[..., Any]] = None
    validate_default_responses: bool = True

    @classmethod
    def from_config(cls, settings: RunnerConfig, **overrides: Any) -> "RunnerOptions":
        values = {
            "auto_handle_http_errors": settings.AUTO_HANDLE_HTTP_ERRORS,
            "validate_default_responses": settings.VALIDATE_DEFAULT_RESPONSES,
        }
        values.update(overrides)
        return cls(**values)


# Load config as a singleton.
# pydantic-settings reads environment variables during instantiation.
try:
    config = RunnerConfig()
except Exception as e:
    sys.stderr.write(f"Failed to load configuration: {e}\n")
    raise
