"""Datastore-to-warehouse type mapping.

This module holds the fixed declared-type table and the repeated-field
heuristic used by schema inference.
"""

from __future__ import annotations

from types import MappingProxyType

from core.types import FieldType, KindStat, PropertyStat

_STRING_TYPES = (
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
)

DECLARED_TYPE_MAPPING = MappingProxyType(
    {
        **{declared_type: FieldType.STRING for declared_type in _STRING_TYPES},
        "Date/Time": FieldType.TIMESTAMP,
        "Boolean": FieldType.BOOLEAN,
        "Float": FieldType.FLOAT,
        "Integer": FieldType.INTEGER,
    }
)


def map_property_type(declared_type: str) -> FieldType | None:
    """Map a declared datastore property type to a warehouse column type.

    Args:
        declared_type: Type name reported by property statistics.

    Returns:
        Column type, or None when the declared type has no mapping.
    """
    return DECLARED_TYPE_MAPPING.get(declared_type)


def is_repeated_field(property_stat: PropertyStat, kind_stat: KindStat) -> bool:
    """Guess whether a property holds multiple values per entity.

    More observed values than entities means the property must appear more
    than once on at least one entity. A list property that never holds more
    than one value per entity is reported as not repeated, and inflated
    statistics can mark a single-valued property as repeated: the store does
    not expose per-entity cardinality.

    Args:
        property_stat: Statistics for the property.
        kind_stat: Statistics for the property's kind.

    Returns:
        True when the column should be REPEATED.
    """
    return property_stat.count > kind_stat.count
