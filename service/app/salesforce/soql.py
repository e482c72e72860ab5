"""SOQL query assembly.

All caller-supplied values that end up inside query text go through
``quote()``. Nothing else in the codebase formats string literals into SOQL.
"""

from __future__ import annotations

from collections.abc import Sequence

_ESCAPES = (
    ("\\", "\\\\"),  # backslash first, or the quote escapes get doubled
    ("'", "\\'"),
)


def escape(value: str) -> str:
    """Backslash-escape characters that would end a SOQL string literal."""
    for raw, escaped in _ESCAPES:
        value = value.replace(raw, escaped)
    return value


def quote(value: str) -> str:
    """Return ``value`` as a single-quoted SOQL string literal."""
    return f"'{escape(value)}'"


def select(
    object_type: str,
    fields: Sequence[str],
    *,
    where: str | None = None,
    order_by: str | None = None,
    limit: int | None = None,
) -> str:
    """Build a SELECT statement.

    ``where`` must already be assembled with ``quote()`` for any literal
    values; object, field and ordering names are fixed by the caller's code,
    never by request data.
    """
    parts = [f"SELECT {', '.join(fields)} FROM {object_type}"]
    if where:
        parts.append(f"WHERE {where}")
    if order_by:
        parts.append(f"ORDER BY {order_by}")
    if limit is not None:
        parts.append(f"LIMIT {int(limit)}")
    return " ".join(parts)
