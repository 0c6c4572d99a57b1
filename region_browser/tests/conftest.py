from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import pytest
import requests


class FakeResponse:
    def __init__(self, payload: Any = None, status_code: int = 200, invalid_json: bool = False) -> None:
        self._payload = payload
        self.status_code = status_code
        self._invalid_json = invalid_json

    def json(self) -> Any:
        if self._invalid_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


class FakeSession:
    """Stands in for ``requests.Session`` and records every GET."""

    def __init__(self) -> None:
        self.calls: List[Tuple[str, Dict[str, object]]] = []
        self._routes: Dict[str, Any] = {}

    def route(self, endpoint: str, result: Any) -> None:
        self._routes[endpoint] = result

    def get(self, url: str, params: Optional[Dict[str, object]] = None, timeout: Optional[float] = None) -> FakeResponse:
        self.calls.append((url, dict(params or {})))
        endpoint = url.rsplit("/", 1)[-1]
        result = self._routes.get(endpoint)
        if callable(result):
            result = result(dict(params or {}))
        if isinstance(result, Exception):
            raise result
        if isinstance(result, FakeResponse):
            return result
        return FakeResponse(result)

    def calls_to(self, endpoint: str) -> List[Dict[str, object]]:
        return [params for url, params in self.calls if url.endswith(f"/{endpoint}")]


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def connection_error() -> requests.ConnectionError:
    return requests.ConnectionError("connection refused")


@pytest.fixture
def make_response():
    return FakeResponse
