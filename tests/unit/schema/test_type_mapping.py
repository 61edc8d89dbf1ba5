"""Unit tests for declared type mapping and the repeated-field heuristic."""

from __future__ import annotations

import pytest

from core.types import FieldType, KindStat, PropertyStat
from schema.type_mapping import is_repeated_field, map_property_type


@pytest.mark.parametrize(
    "declared_type",
    [
        "Blob",
        "BlobKey",
        "Category",
        "Email",
        "IM",
        "Key",
        "Link",
        "PhoneNumber",
        "PostalAddress",
        "Rating",
        "ShortBlob",
        "String",
    ],
)
def test_map_property_type_maps_text_like_types_to_string(declared_type: str) -> None:
    """Binary and text-like declared types should all become STRING."""
    assert map_property_type(declared_type) is FieldType.STRING


def test_map_property_type_maps_integer_to_integer_enum() -> None:
    """Integer should map to the INTEGER enum member."""
    assert map_property_type("Integer") is FieldType.INTEGER


@pytest.mark.parametrize("declared_type", ["GeoPt", "User", "NULL", "string", ""])
def test_map_property_type_returns_none_for_unknown_types(declared_type: str) -> None:
    """Unknown or differently-cased names should have no mapping."""
    assert map_property_type(declared_type) is None


def _stats(property_count: int, entity_count: int) -> tuple[PropertyStat, KindStat]:
    property_stat = PropertyStat(
        kind_name="Person",
        property_name="tags",
        property_type="String",
        count=property_count,
    )
    return property_stat, KindStat(kind_name="Person", count=entity_count)


@pytest.mark.parametrize(
    ("property_count", "entity_count", "expected"),
    [(11, 10, True), (10, 10, False), (3, 10, False), (1, 0, True)],
)
def test_is_repeated_field_compares_value_and_entity_counts(
    property_count: int,
    entity_count: int,
    expected: bool,
) -> None:
    """Only strictly more values than entities should mark a field repeated."""
    assert is_repeated_field(*_stats(property_count, entity_count)) is expected


def test_is_repeated_field_misses_sparse_list_properties() -> None:
    """A list property on few entities can still look single-valued."""
    # 2 of 10 entities hold 3 values each: 6 values, 10 entities.
    assert is_repeated_field(*_stats(6, 10)) is False
