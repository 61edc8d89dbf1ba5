"""Core constants used across kindsync modules.

This module centralizes wire literals and configuration defaults.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

WAREHOUSE_SCOPE = "https://www.googleapis.com/auth/bigquery"
DEFAULT_API_BASE_URL = "https://www.googleapis.com/bigquery/v2"
INSERT_ALL_PATH = "/projects/{project}/datasets/{dataset}/tables/{table}/insertAll"
TABLES_PATH = "/projects/{project}/datasets/{dataset}/tables"
INSERT_ALL_REQUEST_KIND = "bigquery#tableDataInsertAllRequest"
TABLE_RESOURCE_KIND = "bigquery#table"
TIMESTAMP_FIELD_NAME = "__timestamp__"
BLOB_TYPE_MARKER = "blob"
BLOB_PLACEHOLDER = "(blob)"
EXCLUDE_NOTHING_PATTERN = "(?!)"
INSERT_ID_SEPARATOR = "#"
DEFAULT_BATCH_SIZE = 500
SYNC_OPTIONS_VERSION = 1
