"""Runtime configuration model for kindsync.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os

from core.constants import DEFAULT_API_BASE_URL, DEFAULT_BATCH_SIZE
from core.errors import KindSyncConfigError


@dataclass(frozen=True)
class KindSyncConfig:
    """Validated runtime configuration.

    Attributes:
        project_id: Warehouse project that owns the destination dataset.
        dataset_id: Warehouse dataset holding one table per kind.
        api_base_url: Root URL of the warehouse REST API.
        access_token: OAuth bearer token for the warehouse scope.
        exclude_pattern: Default regexp of property names to skip.
        http_timeout_seconds: Optional per-request timeout, None disables it.
        batch_size: Maximum rows submitted per insert call by ``sync``.
    """

    project_id: str | None
    dataset_id: str | None
    api_base_url: str
    access_token: str | None
    exclude_pattern: str
    http_timeout_seconds: float | None
    batch_size: int

    def __post_init__(self) -> None:
        if self.batch_size < 1:
            raise KindSyncConfigError(
                f"Invalid batch size {self.batch_size}: must be at least 1."
            )

    @classmethod
    def from_env(cls) -> "KindSyncConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            KindSyncConfigError: If environment values are invalid.
        """
        timeout_value = os.getenv("KINDSYNC_HTTP_TIMEOUT")
        batch_size_value = os.getenv("KINDSYNC_BATCH_SIZE", str(DEFAULT_BATCH_SIZE))
        return cls(
            project_id=os.getenv("KINDSYNC_PROJECT") or None,
            dataset_id=os.getenv("KINDSYNC_DATASET") or None,
            api_base_url=os.getenv("KINDSYNC_API_BASE_URL", DEFAULT_API_BASE_URL).rstrip("/"),
            access_token=os.getenv("KINDSYNC_ACCESS_TOKEN") or None,
            exclude_pattern=os.getenv("KINDSYNC_EXCLUDE", ""),
            http_timeout_seconds=_parse_timeout(timeout_value),
            batch_size=_parse_batch_size(batch_size_value),
        )

    def require_table_target(self) -> tuple[str, str]:
        """Return the destination project and dataset.

        Returns:
            Pair of (project_id, dataset_id).

        Raises:
            KindSyncConfigError: If either value is unset.
        """
        if not self.project_id:
            raise KindSyncConfigError(
                "Warehouse project is not configured. "
                "Set KINDSYNC_PROJECT or pass --project."
            )
        if not self.dataset_id:
            raise KindSyncConfigError(
                "Warehouse dataset is not configured. "
                "Set KINDSYNC_DATASET or pass --dataset."
            )
        return self.project_id, self.dataset_id


def _parse_timeout(raw_value: str | None) -> float | None:
    """Parse the HTTP timeout environment value.

    Args:
        raw_value: Raw string from environment, or None when unset.

    Returns:
        Positive timeout in seconds, or None for no timeout.

    Raises:
        KindSyncConfigError: If value is not a positive number.
    """
    if raw_value is None or not raw_value.strip():
        return None
    try:
        timeout = float(raw_value)
    except ValueError as error:
        raise KindSyncConfigError(
            "Invalid KINDSYNC_HTTP_TIMEOUT value: "
            f"expected seconds, got '{raw_value}'. "
            "Set KINDSYNC_HTTP_TIMEOUT to a positive number or unset it."
        ) from error
    if timeout <= 0:
        raise KindSyncConfigError(
            f"Invalid KINDSYNC_HTTP_TIMEOUT value {timeout}: must be greater than zero."
        )
    return timeout


def _parse_batch_size(raw_value: str) -> int:
    """Parse the batch size environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Positive batch size.

    Raises:
        KindSyncConfigError: If value is not a positive integer.
    """
    try:
        batch_size = int(raw_value)
    except ValueError as error:
        raise KindSyncConfigError(
            "Invalid KINDSYNC_BATCH_SIZE value: "
            f"expected integer, got '{raw_value}'. "
            "Set KINDSYNC_BATCH_SIZE to a numeric value."
        ) from error
    if batch_size < 1:
        raise KindSyncConfigError(
            f"Invalid KINDSYNC_BATCH_SIZE value {batch_size}: must be at least 1."
        )
    return batch_size
