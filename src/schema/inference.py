"""Schema inference from datastore statistics.

This module guesses a warehouse table schema for a kind that has no
declared schema, using the aggregate counters the store keeps about it.
Output order follows property name so re-runs over identical statistics
produce identical schemas.
"""

from __future__ import annotations

from typing import Iterator

from core.errors import KindStatsNotFoundError, KindSyncStatsError
from core.field_names import make_field_name
from core.logging_config import get_logger
from core.types import FieldSchema, KindStat, PropertyStat, TableSchema
from schema.type_mapping import is_repeated_field, map_property_type
from stats.stats_source import StatsSource

_LOGGER = get_logger(__name__)


def infer_schema(kind: str, stats_source: StatsSource) -> TableSchema:
    """Infer the warehouse schema for a kind.

    Args:
        kind: Kind to describe.
        stats_source: Read-only statistics source.

    Returns:
        Schema with one field per distinct, mappable property name.

    Raises:
        KindStatsNotFoundError: If the kind has no kind-level statistics.
        KindSyncStatsError: If property statistics cannot be loaded.
    """
    kind_stat = stats_source.kind_stat(kind)
    if kind_stat is None:
        raise KindStatsNotFoundError(kind)
    fields: list[FieldSchema] = []
    seen_names: set[str] = set()
    dropped_count = 0
    for property_stat in _iter_property_stats(kind, stats_source):
        field_name = make_field_name(property_stat.property_name)
        if field_name in seen_names:
            continue
        schema_field = build_field_schema(property_stat, kind_stat)
        if schema_field is None:
            dropped_count += 1
            continue
        seen_names.add(field_name)
        fields.append(schema_field)
    schema = TableSchema(fields=tuple(fields))
    _LOGGER.info(
        "schema_inferred",
        kind=kind,
        entity_count=kind_stat.count,
        field_count=len(schema.fields),
        dropped_count=dropped_count,
    )
    return schema


def build_field_schema(property_stat: PropertyStat, kind_stat: KindStat) -> FieldSchema | None:
    """Build one column from property statistics.

    Args:
        property_stat: Statistics for the property.
        kind_stat: Statistics for the property's kind.

    Returns:
        Column schema, or None when the declared type is not mappable.
    """
    field_type = map_property_type(property_stat.property_type)
    if field_type is None:
        return None
    return FieldSchema(
        name=make_field_name(property_stat.property_name),
        field_type=field_type,
        repeated=is_repeated_field(property_stat, kind_stat),
    )


def _iter_property_stats(kind: str, stats_source: StatsSource) -> Iterator[PropertyStat]:
    """Yield property stats, adding kind context to load failures."""
    iterator = stats_source.property_stats(kind)
    while True:
        try:
            property_stat = next(iterator)
        except StopIteration:
            return
        except KindSyncStatsError as error:
            raise KindSyncStatsError(
                f"Can't load property stats for kind '{kind}': {error}"
            ) from error
        yield property_stat
