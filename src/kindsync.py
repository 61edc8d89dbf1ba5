"""Public SDK surface for kindsync.

This module provides a stable import path for export-cycle users.
It re-exports the primary client, typed models, and error types.
"""

from __future__ import annotations

from core.config import KindSyncConfig
from core.errors import (
    InsertErrorsError,
    KindStatsNotFoundError,
    KindSyncConfigError,
    KindSyncError,
    KindSyncIngestError,
    KindSyncRecordError,
    KindSyncStatsError,
)
from core.sync_options import SyncOptions, load_sync_options
from core.types import (
    FieldSchema,
    FieldType,
    KindStat,
    PropertyStat,
    Record,
    RecordKey,
    ScalarValue,
    SequenceValue,
    TableSchema,
    TaggedValue,
)
from ingest.normalizer import normalize_record
from ingest.record_payload import read_records_jsonl, record_from_payload
from ingest.streaming import StreamingIngestor
from schema.inference import infer_schema
from schema.type_mapping import is_repeated_field
from stats.stats_source import InMemoryStatsSource, load_stats_source
from sync.sync_sdk import KindSyncClient
from warehouse.http_client import create_http_client

__all__ = [
    "FieldSchema",
    "FieldType",
    "InMemoryStatsSource",
    "InsertErrorsError",
    "KindStat",
    "KindStatsNotFoundError",
    "KindSyncClient",
    "KindSyncConfig",
    "KindSyncConfigError",
    "KindSyncError",
    "KindSyncIngestError",
    "KindSyncRecordError",
    "KindSyncStatsError",
    "PropertyStat",
    "Record",
    "RecordKey",
    "ScalarValue",
    "SequenceValue",
    "StreamingIngestor",
    "SyncOptions",
    "TableSchema",
    "TaggedValue",
    "create_http_client",
    "infer_schema",
    "is_repeated_field",
    "load_stats_source",
    "load_sync_options",
    "normalize_record",
    "read_records_jsonl",
    "record_from_payload",
]
