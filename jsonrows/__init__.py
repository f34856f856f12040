"""Schema inference and row projection for arbitrary JSON documents."""

from .config import ConnectorConfig
from .connector import describe_schema, get_data, get_schema, project_rows
from .schema import Schema
from .types import Aggregation, FieldDescriptor, SchemaMode, SemanticType

__all__ = [
    "Aggregation",
    "ConnectorConfig",
    "FieldDescriptor",
    "Schema",
    "SchemaMode",
    "SemanticType",
    "describe_schema",
    "get_data",
    "get_schema",
    "project_rows",
    "classify",
    "cli",
    "config",
    "connector",
    "errors",
    "fetch",
    "keys",
    "rows",
    "schema",
    "schemas",
    "types",
]
