"""
Services package.

Provides the pipeline stages and the runner that sequences them.
"""

from .processor import Runner, generate_runner, handle_error

__all__ = [
    "Runner",
    "generate_runner",
    "handle_error",
]
