"""
HTTP result models.

Standardizes the output of the dispatch pipeline.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class HttpResult(BaseModel):
    """
    Canonical response produced by the runner.

    Used to decouple the pipeline from any particular web framework's
    Response objects. ``body`` is a readable stream (file-like or async
    iterator of bytes), or None when there is no content to send.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    status: int
    headers: Dict[str, str] = Field(default_factory=dict)
    body: Optional[Any] = None

    @field_validator("headers")
    @classmethod
    def lowercase_header_names(cls, headers: Dict[str, str]) -> Dict[str, str]:
        return {name.lower(): value for name, value in headers.items()}
