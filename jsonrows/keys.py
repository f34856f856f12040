"""Field id normalization and dotted path helpers."""

from __future__ import annotations

import re
from typing import Optional

_WHITESPACE = re.compile(r"\s+")


def normalize(label: str) -> str:
    """Replace whitespace runs with underscores and lower-case the result."""

    return _WHITESPACE.sub("_", label).lower()


def segment_key(label: str) -> str:
    """Normalize a single raw key so it occupies exactly one path segment."""

    return normalize(label.replace(".", "_"))


def element_key(parent_path: Optional[str], current_key: Optional[str]) -> str:
    if current_key is None or current_key == "":
        return ""
    if parent_path is not None:
        return f"{parent_path}.{segment_key(current_key)}"
    return segment_key(current_key)


def split_field_id(field_id: str) -> list[str]:
    return field_id.split(".")
