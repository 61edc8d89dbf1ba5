"""Read-only statistics sources.

This module defines the query contract schema inference relies on
and two implementations: typed in-memory stats and a JSON stats export.
Iterator exhaustion marks the end of a property query; real failures
raise ``KindSyncStatsError``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Iterator, Mapping, Protocol, Sequence

from core.errors import KindSyncStatsError
from core.types import KindStat, PropertyStat
from stats.stats_payload import kind_stat_from_payload, property_stat_from_payload


class StatsSource(Protocol):
    """Query interface over the store's aggregate statistics."""

    def kind_stat(self, kind: str) -> KindStat | None: ...

    def property_stats(self, kind: str) -> Iterator[PropertyStat]: ...


class InMemoryStatsSource:
    """Statistics source backed by already-typed stats objects."""

    def __init__(
        self,
        kind_stats: Iterable[KindStat] = (),
        property_stats: Iterable[PropertyStat] = (),
    ) -> None:
        self._kind_stats = {stat.kind_name: stat for stat in kind_stats}
        self._property_stats = tuple(property_stats)

    def kind_stat(self, kind: str) -> KindStat | None:
        """Return kind-level statistics, or None when the kind is unknown."""
        return self._kind_stats.get(kind)

    def property_stats(self, kind: str) -> Iterator[PropertyStat]:
        """Yield property statistics for a kind ordered by property name."""
        matching = [stat for stat in self._property_stats if stat.kind_name == kind]
        yield from sorted(matching, key=lambda stat: stat.property_name)


class JsonStatsSource:
    """Statistics source over a decoded JSON stats export.

    Entities are decoded lazily, so a malformed property entity fails the
    query that reaches it rather than the whole export.
    """

    def __init__(self, payload: Mapping[str, Any]) -> None:
        self._kind_payloads = _expect_entity_list(payload, "kinds")
        self._property_payloads = _expect_entity_list(payload, "properties")

    def kind_stat(self, kind: str) -> KindStat | None:
        """Return kind-level statistics, or None when the kind is unknown."""
        for entity in self._kind_payloads:
            if entity.get("kind_name") == kind:
                return kind_stat_from_payload(entity)
        return None

    def property_stats(self, kind: str) -> Iterator[PropertyStat]:
        """Yield property statistics for a kind ordered by property name."""
        matching = [entity for entity in self._property_payloads if entity.get("kind_name") == kind]
        for entity in sorted(matching, key=lambda item: str(item.get("property_name", ""))):
            yield property_stat_from_payload(entity)


def load_stats_source(stats_path: str) -> JsonStatsSource:
    """Load a JSON statistics export from disk.

    Args:
        stats_path: Path to a JSON document with ``kinds`` and ``properties`` lists.

    Returns:
        Statistics source over the export.

    Raises:
        KindSyncStatsError: If the file is missing or not valid JSON.
    """
    stats_file = Path(stats_path).expanduser()
    if not stats_file.exists():
        raise KindSyncStatsError(
            f"Statistics export does not exist at {stats_file}. Provide an existing JSON file."
        )
    try:
        payload = json.loads(stats_file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as error:
        raise KindSyncStatsError(
            f"Invalid JSON in statistics export {stats_file} at line {error.lineno}: {error.msg}"
        ) from error
    if not isinstance(payload, dict):
        raise KindSyncStatsError(
            f"Invalid statistics export {stats_file}: expected a JSON object at the top level."
        )
    return JsonStatsSource(payload)


def _expect_entity_list(payload: Mapping[str, Any], key: str) -> Sequence[Mapping[str, Any]]:
    entities = payload.get(key, [])
    if not isinstance(entities, list) or not all(isinstance(item, dict) for item in entities):
        raise KindSyncStatsError(
            f"Invalid statistics export: '{key}' must be a list of objects."
        )
    return entities
