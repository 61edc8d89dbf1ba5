"""Warehouse table-management client.

This module submits table creation requests to the warehouse REST API.
HTTP failures propagate as ``httpx`` errors without wrapping.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol

import httpx

from core.constants import TABLE_RESOURCE_KIND, TABLES_PATH
from core.types import TableDefinition, TableDescriptor, TableReference


class WarehouseTableClient(Protocol):
    """Table-management operations required by table creation."""

    def create_table(self, definition: TableDefinition) -> TableDescriptor: ...


class HttpTableClient:
    """Table client over the warehouse ``tables.insert`` REST endpoint."""

    def __init__(self, http_client: httpx.Client, api_base_url: str) -> None:
        self._http_client = http_client
        self._api_base_url = api_base_url.rstrip("/")

    def create_table(self, definition: TableDefinition) -> TableDescriptor:
        """Create a table and return the created resource.

        Args:
            definition: Table identity, schema, and display metadata.

        Returns:
            Descriptor of the created table.

        Raises:
            httpx.HTTPError: If the request fails or returns a non-2xx status.
        """
        reference = definition.reference
        url = self._api_base_url + TABLES_PATH.format(
            project=reference.project_id,
            dataset=reference.dataset_id,
        )
        response = self._http_client.post(url, json=table_definition_to_payload(definition))
        response.raise_for_status()
        return table_descriptor_from_payload(response.json(), reference)


def table_definition_to_payload(definition: TableDefinition) -> dict[str, object]:
    """Serialize a table definition into the warehouse table resource.

    Args:
        definition: Table creation request.

    Returns:
        JSON-safe request body.
    """
    reference = definition.reference
    return {
        "kind": TABLE_RESOURCE_KIND,
        "description": definition.description,
        "friendlyName": definition.friendly_name,
        "schema": definition.schema.to_payload(),
        "tableReference": {
            "projectId": reference.project_id,
            "datasetId": reference.dataset_id,
            "tableId": reference.table_id,
        },
    }


def table_descriptor_from_payload(
    payload: Mapping[str, Any],
    fallback_reference: TableReference,
) -> TableDescriptor:
    """Decode the created table resource.

    Args:
        payload: Response body from the warehouse.
        fallback_reference: Requested identity, used when the body omits it.

    Returns:
        Parsed table descriptor.
    """
    reference_payload = payload.get("tableReference")
    reference = fallback_reference
    if isinstance(reference_payload, dict):
        reference = TableReference(
            project_id=str(reference_payload.get("projectId", fallback_reference.project_id)),
            dataset_id=str(reference_payload.get("datasetId", fallback_reference.dataset_id)),
            table_id=str(reference_payload.get("tableId", fallback_reference.table_id)),
        )
    etag = payload.get("etag")
    creation_time = payload.get("creationTime")
    return TableDescriptor(
        reference=reference,
        etag=str(etag) if etag is not None else None,
        creation_time=str(creation_time) if creation_time is not None else None,
        raw=dict(payload),
    )
