"""Streaming ingestion into the warehouse.

This module normalizes a batch of records, tags every row with an
insert id, submits the batch as one ``insertAll`` call, and turns
per-row rejections into a single aggregate error.
"""

from __future__ import annotations

from datetime import datetime, timezone
import json
import time
from typing import Any, Callable, Sequence

import httpx

from core.constants import INSERT_ALL_PATH, INSERT_ALL_REQUEST_KIND, INSERT_ID_SEPARATOR
from core.errors import InsertErrorsError, KindSyncIngestError, KindSyncRecordError
from core.logging_config import get_logger
from core.types import InsertAllRequest, InsertRow, Record, RowInsertError
from ingest.normalizer import compile_exclude_pattern, normalize_record

_LOGGER = get_logger(__name__)


class StreamingIngestor:
    """Submits record batches to one project and dataset."""

    def __init__(
        self,
        http_client: httpx.Client,
        api_base_url: str,
        project_id: str,
        dataset_id: str,
        clock_ns: Callable[[], int] = time.time_ns,
    ) -> None:
        self._http_client = http_client
        self._api_base_url = api_base_url.rstrip("/")
        self._project_id = project_id
        self._dataset_id = dataset_id
        self._clock_ns = clock_ns

    def ingest(self, records: Sequence[Record], exclude_pattern: str) -> int:
        """Normalize and stream a batch of records of one kind.

        Args:
            records: Records to submit; the first record's kind names the table.
            exclude_pattern: Regexp of property names to leave out.

        Returns:
            Number of rows submitted, zero for an empty batch.

        Raises:
            httpx.HTTPError: If the request fails or returns a non-2xx status.
            InsertErrorsError: If the warehouse rejected any row.
            KindSyncRecordError: If a record cannot be normalized; nothing is sent.
            KindSyncIngestError: If the rows cannot be encoded or the response
                body cannot be decoded.
        """
        if not records:
            _LOGGER.info("ingest_skipped_empty_batch")
            return 0
        request = self.build_request(records, exclude_pattern)
        table_id = records[0].key.kind
        response = self._post_request(table_id, request)
        row_errors = decode_insert_errors(response)
        if row_errors:
            _LOGGER.error(
                "ingest_insert_errors",
                table_id=table_id,
                row_count=len(request.rows),
                failed_row_count=len(row_errors),
            )
            raise InsertErrorsError(row_errors)
        _LOGGER.info("ingest_batch_submitted", table_id=table_id, row_count=len(request.rows))
        return len(request.rows)

    def build_request(self, records: Sequence[Record], exclude_pattern: str) -> InsertAllRequest:
        """Build the insertAll request body for a batch.

        Args:
            records: Records to submit.
            exclude_pattern: Regexp of property names to leave out.

        Returns:
            Request with one row per record, in record order.

        Raises:
            KindSyncRecordError: If any record holds an unsupported value.
        """
        exclude_re = compile_exclude_pattern(exclude_pattern)
        submitted_at = datetime.now(timezone.utc)
        base_nanos = self._clock_ns()
        rows: list[InsertRow] = []
        for index, record in enumerate(records):
            try:
                row_json = normalize_record(record, exclude_re, submitted_at)
            except TypeError as error:
                raise KindSyncRecordError(
                    f"Can't normalize entity {record.key.encoded} at batch index {index}: {error}"
                ) from error
            rows.append(
                InsertRow(insert_id=build_insert_id(record, base_nanos + index), json=row_json)
            )
        return InsertAllRequest(kind=INSERT_ALL_REQUEST_KIND, rows=tuple(rows))

    def insert_all_url(self, table_id: str) -> str:
        """Return the streaming insert endpoint for a table."""
        return self._api_base_url + INSERT_ALL_PATH.format(
            project=self._project_id,
            dataset=self._dataset_id,
            table=table_id,
        )

    def _post_request(self, table_id: str, request: InsertAllRequest) -> httpx.Response:
        body = encode_request_body(request)
        try:
            response = self._http_client.post(
                self.insert_all_url(table_id),
                content=body,
                headers={"Content-Type": "application/json"},
            )
            response.raise_for_status()
        except httpx.HTTPError as error:
            _LOGGER.error(
                "ingest_request_failed",
                table_id=table_id,
                row_count=len(request.rows),
                error=str(error),
            )
            raise
        return response


def encode_request_body(request: InsertAllRequest) -> bytes:
    """Encode an insertAll request as strict JSON.

    Args:
        request: Request to encode.

    Returns:
        UTF-8 JSON body.

    Raises:
        KindSyncIngestError: If a row holds NaN, Infinity, or a non-JSON value.
    """
    try:
        return json.dumps(request.to_payload(), allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as error:
        raise KindSyncIngestError(
            f"Can't encode insertAll request with {len(request.rows)} row(s): {error}. "
            "Row values must be finite numbers, strings, booleans, or null."
        ) from error


def build_insert_id(record: Record, nanos: int) -> str:
    """Build a row insert id from the entity key and a submission stamp.

    Args:
        record: Source record.
        nanos: Nanosecond submission stamp, unique per row.

    Returns:
        Insert id of the form ``<encoded key>#<nanos>``.
    """
    return f"{record.key.encoded}{INSERT_ID_SEPARATOR}{nanos}"


def decode_insert_errors(response: httpx.Response) -> tuple[RowInsertError, ...]:
    """Decode per-row failures from an insertAll response.

    Args:
        response: Successful HTTP response.

    Returns:
        Failing rows, empty when every row was accepted.

    Raises:
        KindSyncIngestError: If the body is not a valid insertAll response.
    """
    if not response.content:
        return ()
    try:
        payload = response.json()
    except ValueError as error:
        raise KindSyncIngestError(
            f"Invalid insertAll response body: {error}. The warehouse returned non-JSON content."
        ) from error
    if not isinstance(payload, dict):
        raise KindSyncIngestError("Invalid insertAll response body: expected a JSON object.")
    raw_errors = payload.get("insertErrors") or []
    if not isinstance(raw_errors, list):
        raise KindSyncIngestError("Invalid insertAll response: 'insertErrors' must be a list.")
    return tuple(_row_insert_error_from_payload(item) for item in raw_errors)


def _row_insert_error_from_payload(payload: Any) -> RowInsertError:
    if not isinstance(payload, dict) or not isinstance(payload.get("index"), int):
        raise KindSyncIngestError(
            f"Invalid insertAll response: malformed insertErrors entry {payload!r}."
        )
    details = payload.get("errors") or []
    if not isinstance(details, list):
        details = [details]
    return RowInsertError(
        index=payload["index"],
        errors=tuple(_format_error_detail(detail) for detail in details),
    )


def _format_error_detail(detail: Any) -> str:
    if isinstance(detail, dict):
        return json.dumps(detail, sort_keys=True)
    return str(detail)
