"""Unit tests for column name sanitization."""

from __future__ import annotations

import pytest

from core.field_names import make_field_name


@pytest.mark.parametrize(
    ("raw_name", "expected"),
    [
        ("name", "name"),
        ("first-name", "first_name"),
        ("address.city", "address_city"),
        ("2fa", "_2fa"),
        ("", "_"),
        ("ünïcode", "_n_code"),
    ],
)
def test_make_field_name_replaces_illegal_characters(raw_name: str, expected: str) -> None:
    """Sanitized names should only use warehouse-legal characters."""
    assert make_field_name(raw_name) == expected


def test_make_field_name_is_idempotent() -> None:
    """Sanitizing an already-legal name should not change it."""
    once = make_field_name("a b/c")

    assert make_field_name(once) == once
