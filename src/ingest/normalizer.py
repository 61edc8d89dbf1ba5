"""Record normalization into warehouse rows.

This module flattens one typed record into a row of warehouse-safe values.
Blob payloads collapse to a placeholder, sequences become JSON strings,
and every row gets an ingestion timestamp. Field-level problems degrade
to placeholder values and never fail the row.

Known limitation: two property names that sanitize to the same column
name collide and the later one in the record wins.
"""

from __future__ import annotations

from datetime import datetime, timezone
from functools import singledispatch
import json
import re
from typing import Pattern

from core.constants import BLOB_PLACEHOLDER, EXCLUDE_NOTHING_PATTERN, TIMESTAMP_FIELD_NAME
from core.field_names import make_field_name
from core.logging_config import get_logger
from core.types import NormalizedRow, Record, ScalarValue, SequenceValue, TaggedValue

_LOGGER = get_logger(__name__)
_RFC3339_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def compile_exclude_pattern(pattern: str) -> Pattern[str]:
    """Compile a property exclusion pattern.

    An empty pattern excludes nothing. An invalid pattern is logged and
    also excludes nothing.

    Args:
        pattern: User-supplied regular expression.

    Returns:
        Compiled pattern searched against property names.
    """
    stripped = pattern.strip(" \t\n")
    if not stripped:
        return re.compile(EXCLUDE_NOTHING_PATTERN)
    try:
        return re.compile(stripped)
    except re.error as error:
        _LOGGER.warning("exclude_pattern_invalid", pattern=stripped, error=str(error))
        return re.compile(EXCLUDE_NOTHING_PATTERN)


def normalize_record(
    record: Record,
    exclude_pattern: str | Pattern[str],
    now: datetime | None = None,
) -> NormalizedRow:
    """Flatten a record into a warehouse row.

    Args:
        record: Typed source record.
        exclude_pattern: Regexp of property names to drop, raw or compiled.
        now: Normalization time, defaults to the current UTC time.

    Returns:
        Row keyed by sanitized column name with ``__timestamp__`` added.
    """
    exclude_re = (
        compile_exclude_pattern(exclude_pattern)
        if isinstance(exclude_pattern, str)
        else exclude_pattern
    )
    row: dict[str, object] = {}
    for name, value in record.properties.items():
        if exclude_re.search(name):
            continue
        row[make_field_name(name)] = normalize_value(value)
    row[TIMESTAMP_FIELD_NAME] = format_rfc3339(now or datetime.now(timezone.utc))
    return row


def format_rfc3339(moment: datetime) -> str:
    """Format a datetime as a UTC RFC 3339 string with second precision."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime(_RFC3339_FORMAT)


@singledispatch
def normalize_value(value: object) -> object:
    """Normalize one property value into a warehouse-safe value."""
    raise TypeError(f"Unsupported property value type: {type(value).__name__}")


@normalize_value.register
def _normalize_scalar(value: ScalarValue) -> object:
    return value.value


@normalize_value.register
def _normalize_tagged(value: TaggedValue) -> object:
    if value.is_blob:
        return BLOB_PLACEHOLDER
    return value.value


@normalize_value.register
def _normalize_sequence(value: SequenceValue) -> object:
    if not value.items:
        return ""
    first_item = value.items[0]
    if isinstance(first_item, TaggedValue) and first_item.is_blob:
        return BLOB_PLACEHOLDER
    try:
        payload = [_sequence_item_payload(item) for item in value.items]
        return json.dumps(payload, separators=(",", ":"))
    except (TypeError, ValueError) as error:
        _LOGGER.warning("sequence_serialization_failed", error=str(error))
        return ""


def _sequence_item_payload(item: ScalarValue | TaggedValue) -> object:
    if isinstance(item, TaggedValue):
        return {"type": item.type_marker, "value": item.value}
    return item.value
