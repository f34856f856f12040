"""JSON schema definitions for annotated field specifications."""

from __future__ import annotations

ANNOTATED_FIELD_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "description": {"type": ["string", "null"]},
        "type": {"type": "string", "minLength": 1},
        "aggregation": {"type": ["string", "null"]},
        "value": {},
    },
    "required": ["type"],
    "additionalProperties": True,
}
