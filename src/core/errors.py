"""kindsync exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
Transport failures are not wrapped: they surface as ``httpx`` errors.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from core.types import RowInsertError


class KindSyncError(Exception):
    """Base exception for all kindsync failures."""


class KindSyncConfigError(KindSyncError):
    """Raised for invalid runtime configuration or sync options."""


class KindSyncStatsError(KindSyncError):
    """Raised when datastore statistics cannot be loaded or parsed."""


class KindStatsNotFoundError(KindSyncStatsError):
    """Raised when no kind-level statistics exist for a kind."""

    def __init__(self, kind: str) -> None:
        super().__init__(
            f"No datastore statistics found for kind '{kind}'. "
            "Statistics are refreshed periodically by the store; retry after they are built."
        )
        self.kind = kind


class KindSyncRecordError(KindSyncError):
    """Raised when a source record cannot be decoded into properties."""


class KindSyncIngestError(KindSyncError):
    """Raised for streaming insert failures reported by the warehouse."""


class InsertErrorsError(KindSyncIngestError):
    """Raised when the warehouse rejects some rows of an accepted batch."""

    def __init__(self, row_errors: tuple["RowInsertError", ...]) -> None:
        super().__init__(_format_row_errors(row_errors))
        self.row_errors = row_errors


def _format_row_errors(row_errors: tuple["RowInsertError", ...]) -> str:
    """Render per-row insert errors as one multi-line message.

    Args:
        row_errors: Failing rows with their error details.

    Returns:
        Human-readable error listing.
    """
    lines = [f"Insert errors when ingesting {len(row_errors)} row(s):"]
    for row_error in row_errors:
        lines.append(f"Errors at row index {row_error.index}:")
        for detail in row_error.errors:
            lines.append(f"  - {detail}")
    return "\n".join(lines)
