"""Serialization helpers for JSON columns and row decoding.

Decimal values are written as JSON numbers (integers when integral).  Row
decoding turns JSON text columns back into Python objects
and SQLite's 0/1 integers back into booleans.
"""

from __future__ import annotations

import json
import uuid
from collections.abc import Iterable
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from influencerflow.domain.errors import InfluencerFlowError


class _DecimalEncoder(json.JSONEncoder):
    """JSON encoder that converts Decimal values to numbers."""

    def default(self, o: object) -> Any:
        if isinstance(o, Decimal):
            return int(o) if o == o.to_integral_value() else float(o)
        if isinstance(o, datetime):
            return o.isoformat()
        return super().default(o)


def dump_json(value: Any) -> str:
    """JSON-encode a column value, handling Decimal and datetime.

    Args:
        value: Any JSON-compatible structure.

    Returns:
        The JSON text to store.
    """
    return json.dumps(value, cls=_DecimalEncoder)


def load_json(text: str | None, default: Any = None) -> Any:
    """Decode a JSON column, returning *default* for NULL or invalid text."""
    if text is None or text == "":
        return default
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return default


def decode_row(
    row: dict[str, Any] | None,
    json_columns: Iterable[str] = (),
    bool_columns: Iterable[str] = (),
) -> dict[str, Any] | None:
    """Decode JSON and boolean columns of a fetched row in place.

    Args:
        row: The row dict (``None`` passes through).
        json_columns: Columns holding JSON text.
        bool_columns: Columns holding 0/1 integers.

    Returns:
        The same dict with decoded values, or ``None``.
    """
    if row is None:
        return None
    for column in json_columns:
        if column in row:
            row[column] = load_json(row[column])
    for column in bool_columns:
        if column in row and row[column] is not None:
            row[column] = bool(row[column])
    return row


def now_iso() -> str:
    """Current UTC time as an ISO-8601 string with microseconds."""
    return datetime.now(tz=UTC).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def new_id() -> str:
    """Generate a new record identifier."""
    return str(uuid.uuid4())


def require_row(row: dict[str, Any] | None, table: str, key: str | None) -> dict[str, Any]:
    """Return a row read back after a write, failing loudly if it is gone."""
    if row is None:
        raise InfluencerFlowError(f"{table} row {key} is missing after write")
    return row
