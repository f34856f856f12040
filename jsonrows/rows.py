"""Projection of records onto requested fields."""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable, Mapping, Optional, Sequence

import pandas as pd

from .classify import DATE_TYPE
from .keys import segment_key, split_field_id
from .types import FieldDescriptor, SchemaMode

RowValue = Optional[Any]

logger = logging.getLogger(__name__)

_MISSING = object()


def resolve_path(path: Sequence[str], record: Any) -> Any:
    """Walk `path` through a nested record.

    Each segment is looked up by exact key first, then by comparing the
    normalized form of every key at that level. A segment that lands on
    null resolves the whole field to an empty string. A segment that matches
    nothing resolves to None.
    """

    node = record
    for segment in path:
        if not isinstance(node, Mapping):
            return None

        child = node.get(segment, _MISSING)
        if child is _MISSING:
            for key in node:
                if segment_key(str(key)) == segment:
                    child = node[key]
                    break

        if child is _MISSING:
            return None
        if child is None:
            return ""
        node = child
    return node


def convert_date(value: Any) -> Any:
    """Render a date/time as a sortable `YYYYMMDDHH` string in UTC.

    Values that cannot be parsed are returned unchanged.
    """

    if not isinstance(value, str) or not value:
        return value
    timestamp = pd.to_datetime(value, utc=True, errors="coerce")
    if pd.isna(timestamp):
        logger.debug("Unparseable date value %r left as-is", value)
        return value
    return f"{timestamp.year:04d}{timestamp.month:02d}{timestamp.day:02d}{timestamp.hour:02d}"


def validate_value(field: FieldDescriptor, value: Any) -> RowValue:
    """Coerce a resolved value into something the host can display."""

    if field.semantic_type is DATE_TYPE:
        value = convert_date(value)

    if isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return None


def project(
    records: Iterable[Any],
    fields: Sequence[FieldDescriptor],
    mode: SchemaMode = SchemaMode.HEURISTIC,
) -> list[list[RowValue]]:
    """Return one row per record, values ordered like `fields`."""

    paths = [split_field_id(field.id) for field in fields]
    rows: list[list[RowValue]] = []

    for record in records:
        if record is None:
            rows.append(["" for _ in fields])
            continue

        values: list[RowValue] = []
        for field, path in zip(fields, paths):
            resolved = resolve_path(path, record)
            if mode is SchemaMode.ANNOTATED:
                resolved = _annotated_value(resolved)
            values.append(validate_value(field, resolved))
        rows.append(values)

    return rows


def _annotated_value(node: Any) -> Any:
    if isinstance(node, Mapping):
        value = node.get("value")
        return "" if value is None and "value" in node else value
    return node
