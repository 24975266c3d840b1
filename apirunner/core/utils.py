"""
Runner Utility Module
"""

import inspect
from typing import Any


async def maybe_await(value: Any) -> Any:
    """
    Await ``value`` if it is awaitable, otherwise return it as-is.

    Lets collaborators be written as plain functions or coroutines.
    """
    if inspect.isawaitable(value):
        return await value
    return value


def is_readable(value: Any) -> bool:
    """
    Returns True if ``value`` already exposes a streaming-read interface:
    a file-like object with ``read()`` or an async iterator.
    """
    return callable(getattr(value, "read", None)) or hasattr(value, "__aiter__")
