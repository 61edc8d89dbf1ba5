"""JSON payload decoding for datastore statistics.

Payloads use the field names of the store's ``__Stat_Kind__`` and
``__Stat_PropertyType_PropertyName_Kind__`` entities.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping

from core.errors import KindSyncStatsError
from core.types import KindStat, PropertyStat


def kind_stat_from_payload(payload: Mapping[str, Any]) -> KindStat:
    """Decode one kind-level statistics entity.

    Args:
        payload: Stats entity fields.

    Returns:
        Parsed kind statistics.

    Raises:
        KindSyncStatsError: If required fields are missing or invalid.
    """
    return KindStat(
        kind_name=_required_string(payload, "kind_name"),
        count=_required_int(payload, "count"),
        entity_bytes=_optional_int(payload, "entity_bytes"),
        index_bytes=_optional_int(payload, "builtin_index_bytes"),
        index_count=_optional_int(payload, "builtin_index_count"),
        composite_index_bytes=_optional_int(payload, "composite_index_bytes"),
        composite_index_count=_optional_int(payload, "composite_index_count"),
        timestamp=_optional_timestamp(payload, "timestamp"),
    )


def property_stat_from_payload(payload: Mapping[str, Any]) -> PropertyStat:
    """Decode one property-level statistics entity.

    Args:
        payload: Stats entity fields.

    Returns:
        Parsed property statistics.

    Raises:
        KindSyncStatsError: If required fields are missing or invalid.
    """
    return PropertyStat(
        kind_name=_required_string(payload, "kind_name"),
        property_name=_required_string(payload, "property_name"),
        property_type=_required_string(payload, "property_type"),
        count=_required_int(payload, "count"),
        bytes=_optional_int(payload, "bytes"),
        index_bytes=_optional_int(payload, "builtin_index_bytes"),
        index_count=_optional_int(payload, "builtin_index_count"),
        timestamp=_optional_timestamp(payload, "timestamp"),
    )


def _required_string(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str) or not value:
        raise KindSyncStatsError(
            f"Invalid statistics entity: field '{key}' must be a non-empty string, got {value!r}."
        )
    return value


def _required_int(payload: Mapping[str, Any], key: str) -> int:
    if key not in payload:
        raise KindSyncStatsError(f"Invalid statistics entity: missing integer field '{key}'.")
    return _optional_int(payload, key)


def _optional_int(payload: Mapping[str, Any], key: str) -> int:
    value = payload.get(key, 0)
    if isinstance(value, bool) or not isinstance(value, int):
        raise KindSyncStatsError(
            f"Invalid statistics entity: field '{key}' must be an integer, got {value!r}."
        )
    return value


def _optional_timestamp(payload: Mapping[str, Any], key: str) -> datetime | None:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise KindSyncStatsError(
            f"Invalid statistics entity: field '{key}' must be an ISO timestamp string."
        )
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as error:
        raise KindSyncStatsError(
            f"Invalid statistics entity: field '{key}' is not an ISO timestamp: {value!r}."
        ) from error
