"""Typed sync options parsing.

This module loads and validates the YAML file that lists which kinds
to export, where to export them, and which properties to leave out.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Sequence, cast

import yaml

from core.constants import SYNC_OPTIONS_VERSION
from core.errors import KindSyncConfigError

_ROOT_KEYS = frozenset({"version", "project", "dataset", "exclude", "kinds"})
_KIND_KEYS = frozenset({"name", "exclude"})


@dataclass(frozen=True)
class KindSyncOptions:
    """Per-kind export settings."""

    name: str
    exclude_pattern: str | None = None


@dataclass(frozen=True)
class SyncOptions:
    """Validated sync options root object."""

    version: int
    project_id: str | None
    dataset_id: str | None
    exclude_pattern: str | None
    kinds: tuple[KindSyncOptions, ...]

    def kind_names(self) -> tuple[str, ...]:
        """Return configured kind names in file order."""
        return tuple(kind.name for kind in self.kinds)

    def exclude_for(self, kind_name: str) -> str | None:
        """Resolve the exclude pattern for one kind.

        Args:
            kind_name: Kind identifier.

        Returns:
            Per-kind pattern, else the file default, else None.
        """
        for kind in self.kinds:
            if kind.name == kind_name and kind.exclude_pattern is not None:
                return kind.exclude_pattern
        return self.exclude_pattern


def load_sync_options(options_path: str) -> SyncOptions:
    """Load and validate a YAML sync options file.

    Args:
        options_path: File path to YAML sync options.

    Returns:
        Fully validated sync options.

    Raises:
        KindSyncConfigError: If file is invalid or schema checks fail.
    """
    payload = _load_yaml_payload(options_path)
    return parse_sync_options(payload)


def parse_sync_options(payload: object) -> SyncOptions:
    """Validate an already-decoded sync options payload.

    Args:
        payload: Decoded YAML document.

    Returns:
        Fully validated sync options.

    Raises:
        KindSyncConfigError: If schema checks fail.
    """
    root_mapping = _expect_mapping(payload, "sync options root")
    _validate_keys(root_mapping, _ROOT_KEYS, "sync options root")
    version = _parse_version(root_mapping)
    kinds = _parse_kinds(root_mapping)
    return SyncOptions(
        version=version,
        project_id=_optional_string(root_mapping, "project", "sync options root"),
        dataset_id=_optional_string(root_mapping, "dataset", "sync options root"),
        exclude_pattern=_optional_string(root_mapping, "exclude", "sync options root"),
        kinds=kinds,
    )


def _load_yaml_payload(options_path: str) -> object:
    options_file = Path(options_path).expanduser().resolve()
    if not options_file.exists():
        raise KindSyncConfigError(
            f"Sync options file does not exist at {options_file}. Provide a valid YAML file path."
        )
    try:
        payload = cast(object, yaml.safe_load(options_file.read_text(encoding="utf-8")))
    except OSError as error:
        raise KindSyncConfigError(
            f"Failed to read sync options at {options_file}: {error}. "
            "Check file permissions and retry."
        ) from error
    except yaml.YAMLError as error:
        raise KindSyncConfigError(
            f"Failed to parse YAML sync options at {options_file}: {error}. "
            "Fix YAML syntax and retry."
        ) from error
    if payload is None:
        raise KindSyncConfigError(
            f"Sync options at {options_file} are empty. Define 'version' and 'kinds'."
        )
    return payload


def _expect_mapping(value: object, context: str) -> Mapping[str, object]:
    if isinstance(value, Mapping):
        normalized_mapping = {}
        for key, payload in value.items():
            if not isinstance(key, str):
                raise KindSyncConfigError(
                    f"Invalid {context}: expected string keys, got {type(key).__name__}."
                )
            normalized_mapping[key] = payload
        return normalized_mapping
    raise KindSyncConfigError(
        f"Invalid {context}: expected object mapping, got {type(value).__name__}."
    )


def _expect_sequence(value: object, context: str) -> Sequence[object]:
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return value
    raise KindSyncConfigError(f"Invalid {context}: expected list, got {type(value).__name__}.")


def _validate_keys(mapping: Mapping[str, object], allowed: frozenset[str], context: str) -> None:
    unknown_keys = sorted(set(mapping) - allowed)
    if unknown_keys:
        raise KindSyncConfigError(
            f"Unknown {context} field(s): {', '.join(unknown_keys)}. "
            f"Supported fields: {', '.join(sorted(allowed))}."
        )


def _parse_version(root_mapping: Mapping[str, object]) -> int:
    raw_version = root_mapping.get("version")
    if not isinstance(raw_version, int) or isinstance(raw_version, bool):
        raise KindSyncConfigError(
            f"Sync options field 'version' must be an integer. Set version: {SYNC_OPTIONS_VERSION}."
        )
    if raw_version != SYNC_OPTIONS_VERSION:
        raise KindSyncConfigError(
            f"Unsupported sync options version {raw_version}. Use version: {SYNC_OPTIONS_VERSION}."
        )
    return raw_version


def _parse_kinds(root_mapping: Mapping[str, object]) -> tuple[KindSyncOptions, ...]:
    raw_kinds = root_mapping.get("kinds")
    if raw_kinds is None:
        raise KindSyncConfigError("Sync options must define a 'kinds' list.")
    kinds: list[KindSyncOptions] = []
    seen_names: set[str] = set()
    for index, raw_kind in enumerate(_expect_sequence(raw_kinds, "sync options kinds")):
        context = f"kinds[{index}]"
        kind_mapping = _expect_mapping(raw_kind, context)
        _validate_keys(kind_mapping, _KIND_KEYS, context)
        name = _optional_string(kind_mapping, "name", context)
        if not name:
            raise KindSyncConfigError(f"Sync options {context} must define a non-empty 'name'.")
        if name in seen_names:
            raise KindSyncConfigError(
                f"Sync options list kind '{name}' more than once. Keep one entry per kind."
            )
        seen_names.add(name)
        kinds.append(
            KindSyncOptions(
                name=name,
                exclude_pattern=_optional_string(kind_mapping, "exclude", context),
            )
        )
    return tuple(kinds)


def _optional_string(mapping: Mapping[str, object], key: str, context: str) -> str | None:
    value = mapping.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise KindSyncConfigError(
            f"Invalid {context} field '{key}': expected string, got {type(value).__name__}."
        )
    return value
