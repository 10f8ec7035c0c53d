"""
Table View Module

Client-side sorting and filtering of in-memory row lists for the sales
and cost tables.
"""

from datetime import tzinfo
from enum import Enum
from typing import Any

from .formatting import format_date

SALE_FIELDS = {
    "id": "number",
    "description": "text",
    "quantity": "number",
    "price": "number",
    "created_at": "date",
}

COST_FIELDS = {
    "id": "number",
    "description": "text",
    "amount": "number",
    "created_at": "date",
}


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


def field_value(row: Any, field: str) -> Any:
    if isinstance(row, dict):
        return row.get(field)
    return getattr(row, field, None)


def sort_rows(
    rows: list,
    key: str,
    direction: SortDirection | str = SortDirection.ASC,
    fields: dict[str, str] = SALE_FIELDS,
) -> list:
    """Return a new list ordered by one field.

    The sort is stable in both directions: tied rows keep their input order.

    Raises:
        ValueError: If key is not a field of the table
    """
    if key not in fields:
        raise ValueError(f"Cannot sort by {key!r}; expected one of {', '.join(fields)}")
    descending = SortDirection(direction) == SortDirection.DESC

    # None sorts first ascending
    return sorted(
        rows,
        key=lambda row: (field_value(row, key) is not None, field_value(row, key)),
        reverse=descending,
    )


def _matches(row: Any, field: str, kind: str, needle: str, tz: tzinfo | str | None) -> bool:
    value = field_value(row, field)
    if value is None:
        return False
    if kind == "date":
        return needle in format_date(value, tz)
    if kind == "text":
        return needle.lower() in str(value).lower()
    return needle in str(value)


def filter_rows(
    rows: list,
    filters: dict[str, str | None],
    fields: dict[str, str] = SALE_FIELDS,
    tz: tzinfo | str | None = None,
) -> list:
    """Keep rows matching every non-empty substring filter.

    Text fields match case-insensitively, created_at matches against the
    formatted calendar date, numbers against their decimal text.

    Raises:
        ValueError: If a filter names a field the table does not have
    """
    active = {name: needle for name, needle in filters.items() if needle}
    for name in active:
        if name not in fields:
            raise ValueError(f"Cannot filter by {name!r}; expected one of {', '.join(fields)}")

    return [
        row for row in rows
        if all(_matches(row, name, fields[name], needle, tz) for name, needle in active.items())
    ]
