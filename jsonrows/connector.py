"""Schema discovery and row projection entry points."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Mapping, Optional

from .config import ConnectorConfig
from .errors import InvalidMode, InvalidRootShape, ModeMismatch
from .fetch import fetch_json
from .rows import RowValue, project
from .schema import Schema, build_schema
from .types import SchemaMode

Fetcher = Callable[..., Any]

logger = logging.getLogger(__name__)


def as_records(document: Any) -> list[Any]:
    """Wrap a bare root value in a one-element list."""

    if isinstance(document, list):
        return document
    return [document]


def describe_schema(document: Any, config: ConnectorConfig) -> Schema:
    """Build the full field schema from the first record of `document`."""

    records = as_records(document)
    if not records or not isinstance(records[0], Mapping):
        raise InvalidRootShape()

    schema = build_schema(
        records[0],
        config.mode,
        inline=config.is_inline,
        max_depth=config.max_depth,
    )
    logger.info("Described %s fields in %s mode", len(schema), schema.mode.value)
    return schema


def project_rows(
    document: Any,
    field_ids: Iterable[str],
    config: ConnectorConfig,
    *,
    described_mode: Optional[SchemaMode] = None,
) -> list[list[RowValue]]:
    """Project every record of `document` onto `field_ids`.

    `described_mode` is the mode the caller's schema was described under;
    projecting in a different mode raises `ModeMismatch`.
    """

    _check_mode(described_mode, config)
    schema = describe_schema(document, config)
    fields = schema.for_ids(field_ids)
    return project(as_records(document), fields, config.mode)


def get_schema(request: Mapping[str, Any], *, fetch: Fetcher = fetch_json) -> dict[str, Any]:
    """Handle a host `getSchema` request."""

    config = ConnectorConfig.from_request(request.get("configParams"))
    document = fetch(config.url, timeout=config.timeout)
    return {"schema": describe_schema(document, config).build()}


def get_data(request: Mapping[str, Any], *, fetch: Fetcher = fetch_json) -> dict[str, Any]:
    """Handle a host `getData` request."""

    config = ConnectorConfig.from_request(request.get("configParams"))
    _check_mode(_parse_mode(request.get("describedMode")), config)

    document = fetch(config.url, timeout=config.timeout)
    schema = describe_schema(document, config)
    field_ids = [field["name"] for field in request.get("fields") or []]
    fields = schema.for_ids(field_ids)
    rows = project(as_records(document), fields, config.mode)

    return {
        "schema": [field.to_dict() for field in fields],
        "rows": [{"values": values} for values in rows],
    }


def _parse_mode(value: Any) -> Optional[SchemaMode]:
    if value is None or value == "":
        return None
    if isinstance(value, SchemaMode):
        return value
    try:
        return SchemaMode(str(value).strip().lower())
    except ValueError as exc:
        raise InvalidMode(value) from exc


def _check_mode(described_mode: Optional[SchemaMode], config: ConnectorConfig) -> None:
    if described_mode is not None and described_mode is not config.mode:
        raise ModeMismatch(described_mode.value, config.mode.value)
