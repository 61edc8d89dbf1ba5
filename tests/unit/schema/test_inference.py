"""Unit tests for schema inference."""

from __future__ import annotations

from typing import Iterator

import pytest

from core.errors import KindStatsNotFoundError, KindSyncStatsError
from core.types import FieldSchema, FieldType, KindStat, PropertyStat, TableSchema
from schema.inference import infer_schema
from stats.stats_source import InMemoryStatsSource


def _property(name: str, declared_type: str, count: int, kind: str = "Person") -> PropertyStat:
    return PropertyStat(kind_name=kind, property_name=name, property_type=declared_type, count=count)


class _FailingStatsSource:
    def kind_stat(self, kind: str) -> KindStat | None:
        return KindStat(kind_name=kind, count=1)

    def property_stats(self, kind: str) -> Iterator[PropertyStat]:
        yield _property("alpha", "String", 1)
        raise KindSyncStatsError("datastore query failed")


def test_infer_schema_marks_repeated_fields() -> None:
    """More values than entities should produce a REPEATED column."""
    source = InMemoryStatsSource(
        kind_stats=[KindStat(kind_name="Person", count=10)],
        property_stats=[_property("tags", "String", 25), _property("a", "String", 10)],
    )

    schema = infer_schema("Person", source)

    assert schema == TableSchema(
        fields=(
            FieldSchema(name="a", field_type=FieldType.STRING, repeated=False),
            FieldSchema(name="tags", field_type=FieldType.STRING, repeated=True),
        )
    )


def test_infer_schema_returns_empty_schema_without_properties() -> None:
    """A kind with no property stats should yield zero fields."""
    source = InMemoryStatsSource(kind_stats=[KindStat(kind_name="Empty", count=4)])

    schema = infer_schema("Empty", source)

    assert schema.fields == ()


def test_infer_schema_drops_unmapped_types() -> None:
    """Declared types outside the mapping table should be omitted."""
    source = InMemoryStatsSource(
        kind_stats=[KindStat(kind_name="Person", count=2)],
        property_stats=[
            _property("location", "GeoPt", 2),
            _property("owner", "User", 2),
            _property("score", "Float", 2),
        ],
    )

    schema = infer_schema("Person", source)

    assert schema.field_names() == ("score",)


def test_infer_schema_keeps_first_stat_per_name() -> None:
    """Duplicate observations of one name should keep the first one."""
    source = InMemoryStatsSource(
        kind_stats=[KindStat(kind_name="Person", count=2)],
        property_stats=[_property("age", "Integer", 2), _property("age", "String", 2)],
    )

    schema = infer_schema("Person", source)

    assert schema.fields == (FieldSchema(name="age", field_type=FieldType.INTEGER),)


def test_infer_schema_maps_every_supported_type() -> None:
    """Each mapped declared type should produce its warehouse type."""
    source = InMemoryStatsSource(
        kind_stats=[KindStat(kind_name="Person", count=1)],
        property_stats=[
            _property("a_bool", "Boolean", 1),
            _property("b_date", "Date/Time", 1),
            _property("c_float", "Float", 1),
            _property("d_int", "Integer", 1),
            _property("e_link", "Link", 1),
        ],
    )

    schema = infer_schema("Person", source)

    assert [schema_field.field_type for schema_field in schema.fields] == [
        FieldType.BOOLEAN,
        FieldType.TIMESTAMP,
        FieldType.FLOAT,
        FieldType.INTEGER,
        FieldType.STRING,
    ]


def test_infer_schema_sanitizes_field_names() -> None:
    """Inferred column names should use the sanitized property name."""
    source = InMemoryStatsSource(
        kind_stats=[KindStat(kind_name="Person", count=1)],
        property_stats=[_property("home.city", "String", 1)],
    )

    schema = infer_schema("Person", source)

    assert schema.field_names() == ("home_city",)


def test_infer_schema_ignores_other_kinds() -> None:
    """Property stats of other kinds should not leak into the schema."""
    source = InMemoryStatsSource(
        kind_stats=[KindStat(kind_name="Person", count=1), KindStat(kind_name="Order", count=1)],
        property_stats=[_property("name", "String", 1), _property("total", "Float", 1, "Order")],
    )

    schema = infer_schema("Person", source)

    assert schema.field_names() == ("name",)


def test_infer_schema_raises_for_missing_kind_stats() -> None:
    """Kinds without statistics should raise a not-found error naming the kind."""
    with pytest.raises(KindStatsNotFoundError) as error_info:
        infer_schema("Ghost", InMemoryStatsSource())

    assert error_info.value.kind == "Ghost"


def test_infer_schema_wraps_property_query_failures() -> None:
    """Property query failures should mention the kind being inferred."""
    with pytest.raises(KindSyncStatsError, match="Person"):
        infer_schema("Person", _FailingStatsSource())
