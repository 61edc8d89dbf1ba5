"""Warehouse column name sanitization.

Shared by schema inference and record normalization so inferred
columns and streamed row keys always agree.
"""

from __future__ import annotations

import re

_ILLEGAL_CHARACTERS = re.compile(r"[^A-Za-z0-9_]")


def make_field_name(name: str) -> str:
    """Map a datastore property name to a legal warehouse column name.

    Every character outside ``[A-Za-z0-9_]`` becomes ``_`` and a leading
    digit gets an ``_`` prefix. Distinct names may map to the same column.

    Args:
        name: Original property name.

    Returns:
        Sanitized column name.
    """
    sanitized = _ILLEGAL_CHARACTERS.sub("_", name)
    if not sanitized:
        return "_"
    if sanitized[0].isdigit():
        return f"_{sanitized}"
    return sanitized
