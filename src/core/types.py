"""Shared typed models.

This module defines immutable data models used by the statistics,
schema, ingest, and warehouse layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Mapping, Union

from core.constants import BLOB_TYPE_MARKER

JsonScalar = Union[str, int, float, bool, None]
JsonValue = Union[JsonScalar, list, dict]
NormalizedRow = Mapping[str, object]


@dataclass(frozen=True)
class PropertyStat:
    """Aggregate statistics for one (kind, property, declared type) triple.

    Attributes:
        kind_name: Kind the property belongs to.
        property_name: Property name as stored in the datastore.
        property_type: Declared datastore type, e.g. ``String``.
        count: Number of property values observed across all entities.
        bytes: Total byte size of the stored values.
        index_bytes: Bytes used by built-in indexes.
        index_count: Number of built-in index entries.
        timestamp: When the statistics were computed.
    """

    kind_name: str
    property_name: str
    property_type: str
    count: int
    bytes: int = 0
    index_bytes: int = 0
    index_count: int = 0
    timestamp: datetime | None = None


@dataclass(frozen=True)
class KindStat:
    """Aggregate statistics for one kind.

    Attributes:
        kind_name: Kind identifier.
        count: Number of entities of the kind.
        entity_bytes: Total entity byte size.
        index_bytes: Bytes used by built-in indexes.
        index_count: Number of built-in index entries.
        composite_index_bytes: Bytes used by composite indexes.
        composite_index_count: Number of composite index entries.
        timestamp: When the statistics were computed.
    """

    kind_name: str
    count: int
    entity_bytes: int = 0
    index_bytes: int = 0
    index_count: int = 0
    composite_index_bytes: int = 0
    composite_index_count: int = 0
    timestamp: datetime | None = None


class FieldType(str, Enum):
    """Warehouse column types produced by schema inference."""

    STRING = "STRING"
    TIMESTAMP = "TIMESTAMP"
    BOOLEAN = "BOOLEAN"
    FLOAT = "FLOAT"
    INTEGER = "INTEGER"


@dataclass(frozen=True)
class FieldSchema:
    """One inferred warehouse column."""

    name: str
    field_type: FieldType
    repeated: bool = False

    def to_payload(self) -> dict[str, str]:
        """Serialize into the warehouse table field resource."""
        return {
            "name": self.name,
            "type": self.field_type.value,
            "mode": "REPEATED" if self.repeated else "NULLABLE",
        }


@dataclass(frozen=True)
class TableSchema:
    """Ordered collection of inferred fields."""

    fields: tuple[FieldSchema, ...] = ()

    def field_names(self) -> tuple[str, ...]:
        """Return field names in schema order."""
        return tuple(schema_field.name for schema_field in self.fields)

    def to_payload(self) -> dict[str, object]:
        """Serialize into the warehouse table schema resource."""
        return {"fields": [schema_field.to_payload() for schema_field in self.fields]}


@dataclass(frozen=True)
class TableReference:
    """Fully-qualified warehouse table identity."""

    project_id: str
    dataset_id: str
    table_id: str


@dataclass(frozen=True)
class TableDefinition:
    """Table creation request for one kind.

    Attributes:
        reference: Destination table identity.
        schema: Inferred table schema.
        friendly_name: Display name, the kind name.
        description: Human-readable description.
    """

    reference: TableReference
    schema: TableSchema
    friendly_name: str
    description: str


@dataclass(frozen=True)
class TableDescriptor:
    """Table resource returned by the warehouse after creation."""

    reference: TableReference
    etag: str | None = None
    creation_time: str | None = None
    raw: Mapping[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class ScalarValue:
    """Plain JSON value that passes through unchanged.

    Inside a sequence this may also be a nested list or an untyped object,
    which is serialized as-is with the rest of the sequence.
    """

    value: JsonValue


@dataclass(frozen=True)
class TaggedValue:
    """Property value wrapped with an explicit datastore type marker."""

    type_marker: str
    value: object = None

    @property
    def is_blob(self) -> bool:
        """Whether this value carries an opaque binary payload."""
        return self.type_marker == BLOB_TYPE_MARKER


@dataclass(frozen=True)
class SequenceValue:
    """Multi-valued property."""

    items: tuple[Union[ScalarValue, TaggedValue], ...] = ()


PropertyValue = Union[ScalarValue, TaggedValue, SequenceValue]


@dataclass(frozen=True)
class RecordKey:
    """Stable identity of a source entity.

    Attributes:
        kind: Kind the entity belongs to.
        encoded: Opaque, stable encoded key string.
    """

    kind: str
    encoded: str


@dataclass(frozen=True)
class Record:
    """Raw entity to export."""

    key: RecordKey
    properties: Mapping[str, PropertyValue] = field(default_factory=dict)


@dataclass(frozen=True)
class InsertRow:
    """One row of a streaming insert request."""

    insert_id: str
    json: NormalizedRow

    def to_payload(self) -> dict[str, object]:
        """Serialize into the insertAll row resource."""
        return {"insertId": self.insert_id, "json": dict(self.json)}


@dataclass(frozen=True)
class InsertAllRequest:
    """Streaming insert request body."""

    kind: str
    rows: tuple[InsertRow, ...]

    def to_payload(self) -> dict[str, object]:
        """Serialize into the insertAll request resource."""
        return {"kind": self.kind, "rows": [row.to_payload() for row in self.rows]}


@dataclass(frozen=True)
class RowInsertError:
    """Errors the warehouse reported for one row of a batch."""

    index: int
    errors: tuple[str, ...]
