"""Python SDK for export cycles.

This module exposes high-level APIs for schema inference, table
creation, and streaming ingestion backed by one reusable HTTP client.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Sequence

import httpx

from core.config import KindSyncConfig
from core.logging_config import get_logger
from core.sync_options import SyncOptions
from core.types import Record, TableDescriptor, TableSchema
from ingest.streaming import StreamingIngestor
from schema.inference import infer_schema
from schema.table_creation import create_table_for_kind
from stats.stats_source import StatsSource
from warehouse.http_client import HttpClientProvider, create_http_client
from warehouse.table_client import HttpTableClient

_LOGGER = get_logger(__name__)


class KindSyncClient:
    """Primary SDK entry point for export cycles."""

    def __init__(
        self,
        config: KindSyncConfig | None = None,
        http_client_provider: HttpClientProvider = create_http_client,
    ) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration.
            http_client_provider: Factory for the authenticated HTTP client.
        """
        self._config = config or KindSyncConfig.from_env()
        self._http_client_provider = http_client_provider
        self._http_client: httpx.Client | None = None

    def __enter__(self) -> "KindSyncClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def config(self) -> KindSyncConfig:
        """Runtime configuration used by this client."""
        return self._config

    def close(self) -> None:
        """Close the HTTP client if one was created."""
        if self._http_client is not None:
            self._http_client.close()
            self._http_client = None

    def infer_schema(self, kind: str, stats_source: StatsSource) -> TableSchema:
        """Infer the warehouse schema for a kind.

        Args:
            kind: Kind to describe.
            stats_source: Read-only statistics source.

        Returns:
            Inferred table schema.
        """
        return infer_schema(kind, stats_source)

    def create_table(self, kind: str, stats_source: StatsSource) -> TableDescriptor:
        """Infer a kind's schema and create its warehouse table.

        Args:
            kind: Kind to export.
            stats_source: Read-only statistics source.

        Returns:
            Descriptor of the created table.

        Raises:
            KindSyncConfigError: If project, dataset, or credentials are missing.
            KindSyncStatsError: If statistics are missing or malformed.
            httpx.HTTPError: If the table request fails.
        """
        project_id, dataset_id = self._config.require_table_target()
        table_client = HttpTableClient(self._get_http_client(), self._config.api_base_url)
        return create_table_for_kind(kind, project_id, dataset_id, stats_source, table_client)

    def ingest(self, records: Sequence[Record], exclude_pattern: str | None = None) -> int:
        """Stream one batch of same-kind records.

        Args:
            records: Records to submit.
            exclude_pattern: Property exclusion regexp, defaults to the configured one.

        Returns:
            Number of rows submitted.

        Raises:
            KindSyncConfigError: If project, dataset, or credentials are missing.
            InsertErrorsError: If the warehouse rejected any row.
            httpx.HTTPError: If the insert request fails.
        """
        if not records:
            _LOGGER.info("ingest_skipped_empty_batch")
            return 0
        pattern = self._config.exclude_pattern if exclude_pattern is None else exclude_pattern
        project_id, dataset_id = self._config.require_table_target()
        return self._build_ingestor(project_id, dataset_id).ingest(records, pattern)

    def sync(self, records: Iterable[Record], options: SyncOptions | None = None) -> dict[str, int]:
        """Stream records grouped by kind in configured batch sizes.

        Args:
            records: Records of any kinds.
            options: Optional sync options restricting kinds and exclude patterns.

        Returns:
            Rows submitted per kind, in first-seen kind order.
        """
        grouped = _group_by_kind(records)
        if not grouped:
            _LOGGER.info("ingest_skipped_empty_batch")
            return {}
        project_id, dataset_id = self._resolve_table_target(options)
        ingestor = self._build_ingestor(project_id, dataset_id)
        submitted: dict[str, int] = {}
        for kind, kind_records in grouped.items():
            if options is not None and options.kinds and kind not in options.kind_names():
                _LOGGER.warning("sync_skipped_kind", kind=kind, record_count=len(kind_records))
                continue
            pattern = options.exclude_for(kind) if options is not None else None
            if pattern is None:
                pattern = self._config.exclude_pattern
            submitted[kind] = 0
            for batch in _chunk(kind_records, self._config.batch_size):
                submitted[kind] += ingestor.ingest(batch, pattern)
        _LOGGER.info("sync_completed", submitted=submitted)
        return submitted

    def _resolve_table_target(self, options: SyncOptions | None) -> tuple[str, str]:
        if options is None:
            return self._config.require_table_target()
        config = replace(
            self._config,
            project_id=options.project_id or self._config.project_id,
            dataset_id=options.dataset_id or self._config.dataset_id,
        )
        return config.require_table_target()

    def _build_ingestor(self, project_id: str, dataset_id: str) -> StreamingIngestor:
        return StreamingIngestor(
            self._get_http_client(),
            self._config.api_base_url,
            project_id,
            dataset_id,
        )

    def _get_http_client(self) -> httpx.Client:
        if self._http_client is None:
            self._http_client = self._http_client_provider(self._config)
        return self._http_client


def _group_by_kind(records: Iterable[Record]) -> dict[str, list[Record]]:
    grouped: dict[str, list[Record]] = {}
    for record in records:
        grouped.setdefault(record.key.kind, []).append(record)
    return grouped


def _chunk(records: list[Record], size: int) -> Iterable[list[Record]]:
    for start in range(0, len(records), size):
        yield records[start : start + size]
