"""Warehouse table creation for datastore kinds.

This module turns an inferred schema into a table named after the kind
and submits it through an injected table client.
"""

from __future__ import annotations

from core.logging_config import get_logger
from core.types import TableDefinition, TableDescriptor, TableReference, TableSchema
from schema.inference import infer_schema
from stats.stats_source import StatsSource
from warehouse.table_client import WarehouseTableClient

_LOGGER = get_logger(__name__)


def build_table_definition(
    project_id: str,
    dataset_id: str,
    kind: str,
    schema: TableSchema,
) -> TableDefinition:
    """Build the creation request for a kind's table.

    Args:
        project_id: Destination project.
        dataset_id: Destination dataset.
        kind: Kind name, also used as table id and friendly name.
        schema: Inferred table schema.

    Returns:
        Table definition ready to submit.
    """
    return TableDefinition(
        reference=TableReference(project_id=project_id, dataset_id=dataset_id, table_id=kind),
        schema=schema,
        friendly_name=kind,
        description=f"Warehouse table for datastore kind {kind}",
    )


def create_table_for_kind(
    kind: str,
    project_id: str,
    dataset_id: str,
    stats_source: StatsSource,
    table_client: WarehouseTableClient,
) -> TableDescriptor:
    """Infer a kind's schema and create its warehouse table.

    Args:
        kind: Kind to export.
        project_id: Destination project.
        dataset_id: Destination dataset.
        stats_source: Read-only statistics source.
        table_client: Warehouse table-management client.

    Returns:
        Descriptor of the created table.

    Raises:
        KindStatsNotFoundError: If the kind has no statistics.
        KindSyncStatsError: If property statistics cannot be loaded.
        httpx.HTTPError: If the table client request fails.
    """
    schema = infer_schema(kind, stats_source)
    definition = build_table_definition(project_id, dataset_id, kind, schema)
    descriptor = table_client.create_table(definition)
    _LOGGER.info(
        "table_created",
        kind=kind,
        project_id=descriptor.reference.project_id,
        dataset_id=descriptor.reference.dataset_id,
        table_id=descriptor.reference.table_id,
        field_count=len(schema.fields),
    )
    return descriptor
