"""JSON decoding for exported datastore entities.

This module turns entity JSON objects into typed records.
It is the only place a record can fail to decode.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

from core.errors import KindSyncRecordError
from core.types import (
    PropertyValue,
    Record,
    RecordKey,
    ScalarValue,
    SequenceValue,
    TaggedValue,
)

_SCALAR_TYPES = (str, int, float, bool, type(None))


def record_from_payload(payload: Mapping[str, Any]) -> Record:
    """Decode one entity JSON object.

    Args:
        payload: Object with ``kind``, ``key`` and ``properties`` fields.

    Returns:
        Parsed record.

    Raises:
        KindSyncRecordError: If the entity cannot be read as a property map.
    """
    kind = payload.get("kind")
    encoded_key = payload.get("key")
    if not isinstance(kind, str) or not kind:
        raise KindSyncRecordError("Invalid entity: 'kind' must be a non-empty string.")
    if not isinstance(encoded_key, str) or not encoded_key:
        raise KindSyncRecordError(
            f"Invalid {kind} entity: 'key' must be a non-empty encoded key string."
        )
    raw_properties = payload.get("properties", {})
    if not isinstance(raw_properties, dict):
        raise KindSyncRecordError(
            f"Invalid entity {encoded_key}: 'properties' must be an object."
        )
    properties = {
        str(name): property_value_from_payload(value, str(name), encoded_key)
        for name, value in raw_properties.items()
    }
    return Record(key=RecordKey(kind=kind, encoded=encoded_key), properties=properties)


def property_value_from_payload(value: Any, name: str, encoded_key: str) -> PropertyValue:
    """Decode one property value.

    Args:
        value: Scalar, ``{"type": ..., "value": ...}`` object, untyped
            ``{"value": ...}`` object, or list.
        name: Property name, for error context.
        encoded_key: Owning entity key, for error context.

    Returns:
        Typed property value.

    Raises:
        KindSyncRecordError: If the value shape is not supported.
    """
    if isinstance(value, list):
        return SequenceValue(items=tuple(_sequence_item_from_payload(item) for item in value))
    return _single_value_from_payload(value, name, encoded_key)


def read_records_jsonl(records_path: Path) -> list[Record]:
    """Read entity records from a JSONL file.

    Args:
        records_path: Input JSONL file path.

    Returns:
        Parsed records in file order.

    Raises:
        KindSyncRecordError: If the file is missing or a line is invalid.
    """
    if not records_path.exists():
        raise KindSyncRecordError(
            f"Failed to read records at {records_path}: path does not exist. "
            "Provide an existing JSONL file."
        )
    records: list[Record] = []
    for line_number, line in enumerate(records_path.read_text(encoding="utf-8").splitlines(), 1):
        if not line.strip():
            continue
        payload = _parse_payload_line(records_path, line, line_number)
        try:
            records.append(record_from_payload(payload))
        except KindSyncRecordError as error:
            raise KindSyncRecordError(f"{records_path}:{line_number}: {error}") from error
    return records


def _single_value_from_payload(
    value: Any,
    name: str,
    encoded_key: str,
) -> ScalarValue | TaggedValue:
    if isinstance(value, _SCALAR_TYPES):
        return ScalarValue(value=value)
    if isinstance(value, dict):
        if isinstance(value.get("type"), str):
            return TaggedValue(type_marker=value["type"], value=value.get("value"))
        return ScalarValue(value=value.get("value"))
    raise KindSyncRecordError(
        f"Unsupported value for property '{name}' of entity {encoded_key}: "
        f"expected scalar, object, or list, got {type(value).__name__}."
    )


def _sequence_item_from_payload(item: Any) -> ScalarValue | TaggedValue:
    if isinstance(item, dict) and isinstance(item.get("type"), str):
        return TaggedValue(type_marker=item["type"], value=item.get("value"))
    return ScalarValue(value=item)


def _reject_non_finite(constant: str) -> float:
    raise KindSyncRecordError(
        f"Unsupported number {constant}: property values must be finite JSON numbers."
    )


def _parse_payload_line(records_path: Path, line: str, line_number: int) -> dict[str, Any]:
    """Parse and validate one JSONL payload row.

    Args:
        records_path: Parent file path for context.
        line: Raw JSONL line.
        line_number: One-based line number.

    Returns:
        Parsed payload dictionary.

    Raises:
        KindSyncRecordError: If JSON row is invalid.
    """
    try:
        payload = json.loads(line, parse_constant=_reject_non_finite)
    except json.JSONDecodeError as error:
        raise KindSyncRecordError(
            f"Invalid JSON in {records_path} at line {line_number}: {error.msg}"
        ) from error
    except KindSyncRecordError as error:
        raise KindSyncRecordError(f"{records_path}:{line_number}: {error}") from error
    if not isinstance(payload, dict):
        raise KindSyncRecordError(
            f"Invalid payload in {records_path} at line {line_number}: expected JSON object"
        )
    return payload
