"""Unit tests for kind table creation."""

from __future__ import annotations

import pytest

from core.errors import KindStatsNotFoundError
from core.types import (
    FieldSchema,
    FieldType,
    KindStat,
    PropertyStat,
    TableDefinition,
    TableDescriptor,
    TableSchema,
)
from schema.table_creation import build_table_definition, create_table_for_kind
from stats.stats_source import InMemoryStatsSource


class _RecordingTableClient:
    def __init__(self, error: Exception | None = None) -> None:
        self.definitions: list[TableDefinition] = []
        self._error = error

    def create_table(self, definition: TableDefinition) -> TableDescriptor:
        self.definitions.append(definition)
        if self._error is not None:
            raise self._error
        return TableDescriptor(reference=definition.reference)


def _source() -> InMemoryStatsSource:
    return InMemoryStatsSource(
        kind_stats=[KindStat(kind_name="Person", count=2)],
        property_stats=[
            PropertyStat(kind_name="Person", property_name="name", property_type="String", count=2)
        ],
    )


def test_build_table_definition_names_table_after_kind() -> None:
    """Table id and friendly name should both be the kind."""
    schema = TableSchema(fields=(FieldSchema(name="name", field_type=FieldType.STRING),))

    definition = build_table_definition("demo-project", "analytics", "Person", schema)

    assert (definition.reference.table_id, definition.friendly_name) == ("Person", "Person")


def test_create_table_for_kind_submits_inferred_schema() -> None:
    """The table client should receive the inferred schema."""
    table_client = _RecordingTableClient()

    create_table_for_kind("Person", "demo-project", "analytics", _source(), table_client)

    submitted = table_client.definitions[0]
    assert submitted.schema.fields[0].field_type is FieldType.STRING


def test_create_table_for_kind_surfaces_client_errors_unchanged() -> None:
    """Submission errors should reach the caller as the same exception."""
    failure = RuntimeError("quota exceeded")
    table_client = _RecordingTableClient(error=failure)

    with pytest.raises(RuntimeError) as error_info:
        create_table_for_kind("Person", "demo-project", "analytics", _source(), table_client)

    assert error_info.value is failure


def test_create_table_for_kind_skips_submission_without_stats() -> None:
    """Missing statistics should fail before any table request."""
    table_client = _RecordingTableClient()

    with pytest.raises(KindStatsNotFoundError):
        create_table_for_kind(
            "Ghost", "demo-project", "analytics", InMemoryStatsSource(), table_client
        )

    assert table_client.definitions == []
