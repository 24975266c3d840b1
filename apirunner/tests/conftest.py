from typing import Any, Dict, Optional, Tuple

import pytest

from apirunner.core.request_context import clear_request_id
from apirunner.models.operation import ApiInterface, ResolvedOperation, ResolvedRoute


class FakeRequest:
    """Minimal request handle: method, url and headers."""

    def __init__(self, method: str = "GET", url: str = "/", headers: Optional[Dict[str, str]] = None):
        self.method = method
        self.url = url
        self.headers = headers or {}


class FakeResponse:
    def __init__(self, headers_sent: bool = False):
        self.headers_sent = headers_sent


class StaticApi(ApiInterface):
    """Resolves exact (METHOD, path) pairs to pre-built operations."""

    def __init__(self, routes: Optional[Dict[Tuple[str, str], ResolvedOperation]] = None):
        self.routes = routes or {}
        self.calls = []

    def resolve(self, method: str, path: str, headers: Any) -> Optional[ResolvedRoute]:
        self.calls.append((method, path))
        operation = self.routes.get((method.upper(), path.split("?")[0]))
        if operation is None:
            return None
        return ResolvedRoute(api=self, operation=operation)


def make_operation(controller=None, **kwargs) -> ResolvedOperation:
    if controller is None:

        def controller(context):
            return {"ok": True}

    return ResolvedOperation(controller=controller, **kwargs)


@pytest.fixture
def events():
    return []


@pytest.fixture(autouse=True)
def clean_request_id():
    clear_request_id()
    yield
    clear_request_id()
