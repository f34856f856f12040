"""Semantic type detection for sampled values and declared type tags."""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Any, Optional

from .types import AnnotatedField, FieldSource, HeuristicField, SemanticType


logger = logging.getLogger(__name__)


_INTEGER_LITERAL = re.compile(r"^-?[0-9]+$")
_URL_REGEX = re.compile(r"^https?://\S+$", re.IGNORECASE)

_DECLARED_TYPES: dict[str, SemanticType] = {member.value: member for member in SemanticType}
_DECLARED_TYPES["HYPERLINK"] = SemanticType.URL

DATE_TYPE = SemanticType.YEAR_MONTH_DAY_HOUR


def classify(value: Any, explicit_type_tag: Optional[str] = None) -> SemanticType:
    """Map a raw value, or its declared type tag when given, to a semantic type."""

    if explicit_type_tag is not None:
        return classify_declared(explicit_type_tag)
    return classify_value(value)


def classify_field(source: FieldSource) -> SemanticType:
    if isinstance(source, AnnotatedField):
        return classify_declared(source.type_tag)
    if isinstance(source, HeuristicField):
        return classify_value(source.value)
    raise TypeError(f"Unsupported field source: {type(source).__name__}")


def classify_declared(type_tag: str) -> SemanticType:
    semantic = _DECLARED_TYPES.get(str(type_tag).strip().upper())
    if semantic is None:
        logger.warning("Unknown declared type %r; treating field as TEXT", type_tag)
        return SemanticType.TEXT
    return semantic


def classify_value(value: Any) -> SemanticType:
    """Sniff a sampled value.

    Checks run in a fixed order: integer literal, boolean, date/time, URL, text.
    Only integer-looking strings count as numbers; JSON numbers (ints and
    floats) are always numbers.
    """

    if isinstance(value, bool):
        return SemanticType.BOOLEAN
    if isinstance(value, (int, float)):
        return SemanticType.NUMBER
    if not isinstance(value, str):
        return SemanticType.TEXT

    if _INTEGER_LITERAL.match(value):
        return SemanticType.NUMBER
    if parse_datetime(value) is not None:
        return DATE_TYPE
    if _URL_REGEX.match(value):
        return SemanticType.URL
    return SemanticType.TEXT


def parse_datetime(value: str) -> Optional[datetime]:
    try:
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        return datetime.fromisoformat(value)
    except ValueError:
        return None
