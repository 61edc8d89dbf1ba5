"""Unit tests for core config parsing."""

from __future__ import annotations

import pytest

from core.config import KindSyncConfig
from core.constants import DEFAULT_API_BASE_URL, DEFAULT_BATCH_SIZE
from core.errors import KindSyncConfigError


def test_from_env_reads_table_target(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should resolve project and dataset from environment."""
    monkeypatch.setenv("KINDSYNC_PROJECT", "demo-project")
    monkeypatch.setenv("KINDSYNC_DATASET", "analytics")

    config = KindSyncConfig.from_env()

    assert config.require_table_target() == ("demo-project", "analytics")


def test_from_env_applies_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    """Unset optional values should fall back to documented defaults."""
    for name in ("KINDSYNC_API_BASE_URL", "KINDSYNC_HTTP_TIMEOUT", "KINDSYNC_BATCH_SIZE"):
        monkeypatch.delenv(name, raising=False)

    config = KindSyncConfig.from_env()

    assert (config.api_base_url, config.http_timeout_seconds, config.batch_size) == (
        DEFAULT_API_BASE_URL,
        None,
        DEFAULT_BATCH_SIZE,
    )


def test_from_env_raises_for_invalid_timeout(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fail for non-numeric timeouts."""
    monkeypatch.setenv("KINDSYNC_HTTP_TIMEOUT", "soon")

    with pytest.raises(KindSyncConfigError):
        KindSyncConfig.from_env()


def test_from_env_raises_for_zero_batch_size(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should reject batch sizes below one."""
    monkeypatch.setenv("KINDSYNC_BATCH_SIZE", "0")

    with pytest.raises(KindSyncConfigError):
        KindSyncConfig.from_env()


def test_require_table_target_names_missing_dataset(make_config) -> None:
    """Missing dataset should raise an actionable config error."""
    config = make_config(dataset_id=None)

    with pytest.raises(KindSyncConfigError, match="KINDSYNC_DATASET"):
        config.require_table_target()


def test_config_rejects_non_positive_batch_size(make_config) -> None:
    """Batch sizes below one would drop every record and must be refused."""
    with pytest.raises(KindSyncConfigError, match="at least 1"):
        make_config(batch_size=-1)
