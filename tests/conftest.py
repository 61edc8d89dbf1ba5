"""Pytest configuration for repository test runs."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Callable

import httpx
import pytest


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


class WarehouseStub:
    """Records warehouse requests and replies with queued JSON bodies."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._responses: list[httpx.Response] = []
        self.clients_created = 0

    def reply(self, status_code: int = 200, payload: object | None = None) -> None:
        """Queue the next response."""
        self._responses.append(httpx.Response(status_code, json=payload if payload is not None else {}))

    def request_json(self, index: int = -1) -> dict[str, object]:
        """Decode the JSON body of a recorded request."""
        return json.loads(self.requests[index].content)

    def provider(self, config: object) -> httpx.Client:
        """HTTP client provider backed by this stub."""
        self.clients_created += 1
        return httpx.Client(transport=httpx.MockTransport(self._handle))

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._responses:
            return self._responses.pop(0)
        return httpx.Response(200, json={})


@pytest.fixture
def warehouse_stub() -> WarehouseStub:
    """Fresh warehouse stub per test."""
    return WarehouseStub()


@pytest.fixture
def make_config() -> Callable[..., object]:
    """Build a config with a complete warehouse target."""
    from core.config import KindSyncConfig

    def _make_config(**overrides: object) -> KindSyncConfig:
        values: dict[str, object] = {
            "project_id": "demo-project",
            "dataset_id": "analytics",
            "api_base_url": "https://warehouse.test/v2",
            "access_token": "token-123",
            "exclude_pattern": "",
            "http_timeout_seconds": None,
            "batch_size": 500,
        }
        values.update(overrides)
        return KindSyncConfig(**values)  # type: ignore[arg-type]

    return _make_config
