"""Authenticated HTTP client construction.

This module encapsulates httpx client creation for warehouse calls.
Callers receive the provider as a constructor argument so tests can
swap in a client backed by ``httpx.MockTransport``.
"""

from __future__ import annotations

from typing import Callable

import httpx

from core.config import KindSyncConfig
from core.constants import WAREHOUSE_SCOPE
from core.errors import KindSyncConfigError

HttpClientProvider = Callable[[KindSyncConfig], httpx.Client]


def create_http_client(config: KindSyncConfig) -> httpx.Client:
    """Create an httpx client authorized for the warehouse scope.

    Args:
        config: Runtime config carrying the bearer token and timeout.

    Returns:
        Reusable httpx client.

    Raises:
        KindSyncConfigError: If no access token is configured.
    """
    if not config.access_token:
        raise KindSyncConfigError(
            "No warehouse access token configured. "
            f"Set KINDSYNC_ACCESS_TOKEN to an OAuth token with scope {WAREHOUSE_SCOPE}."
        )
    return httpx.Client(
        headers={"Authorization": f"Bearer {config.access_token}"},
        timeout=httpx.Timeout(config.http_timeout_seconds),
    )
