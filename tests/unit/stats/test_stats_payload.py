"""Unit tests for statistics payload decoding."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from core.errors import KindSyncStatsError
from stats.stats_payload import kind_stat_from_payload, property_stat_from_payload


def test_property_stat_from_payload_reads_datastore_fields() -> None:
    """Datastore stat field names should map onto the typed model."""
    stat = property_stat_from_payload(
        {
            "kind_name": "Person",
            "property_name": "email",
            "property_type": "Email",
            "count": 7,
            "bytes": 140,
            "builtin_index_bytes": 300,
            "builtin_index_count": 14,
            "timestamp": "2024-03-01T12:00:00Z",
        }
    )

    assert (stat.property_type, stat.index_count, stat.timestamp) == (
        "Email",
        14,
        datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc),
    )


def test_property_stat_from_payload_requires_count() -> None:
    """Missing counts should be rejected."""
    with pytest.raises(KindSyncStatsError, match="count"):
        property_stat_from_payload(
            {"kind_name": "Person", "property_name": "email", "property_type": "Email"}
        )


def test_kind_stat_from_payload_rejects_boolean_count() -> None:
    """Booleans are not accepted as integer counters."""
    with pytest.raises(KindSyncStatsError):
        kind_stat_from_payload({"kind_name": "Person", "count": True})


def test_kind_stat_from_payload_rejects_bad_timestamp() -> None:
    """Unparseable timestamps should raise a stats error."""
    with pytest.raises(KindSyncStatsError):
        kind_stat_from_payload({"kind_name": "Person", "count": 1, "timestamp": "yesterday"})
