"""Connector configuration passed explicitly into every call."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from .types import SchemaMode

NESTED_INLINE = "inline"
NESTED_JSON = "json"


@dataclass(slots=True)
class ConnectorConfig:
    """Settings for one schema-discovery or data-projection request."""

    url: Optional[str] = None
    nested_data: str = NESTED_INLINE
    annotated: bool = False
    max_depth: int = 32
    timeout: float = 30.0

    def __post_init__(self) -> None:
        if self.nested_data not in {NESTED_INLINE, NESTED_JSON}:
            raise ValueError("nested_data must be 'inline' or 'json'")
        if self.max_depth <= 0:
            raise ValueError("max_depth must be positive")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")

    @property
    def is_inline(self) -> bool:
        return self.nested_data == NESTED_INLINE

    @property
    def mode(self) -> SchemaMode:
        return SchemaMode.ANNOTATED if self.annotated else SchemaMode.HEURISTIC

    @classmethod
    def from_request(cls, config_params: Optional[Mapping[str, Any]]) -> "ConnectorConfig":
        """Build a config from the host's `configParams` mapping."""

        params = dict(config_params or {})
        kwargs: dict[str, Any] = {
            "url": params.get("url"),
            "nested_data": params.get("nestedData") or NESTED_INLINE,
            "annotated": _as_bool(params.get("annotated", False)),
        }
        if params.get("maxDepth") is not None:
            kwargs["max_depth"] = int(params["maxDepth"])
        if params.get("timeout") is not None:
            kwargs["timeout"] = float(params["timeout"])
        return cls(**kwargs)


def load_config(path: Path) -> ConnectorConfig:
    """Load a connector config from YAML.

    Keys mirror the dataclass fields (`url`, `nested_data`, `annotated`,
    `max_depth`, `timeout`).
    """

    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError("Config file must contain a mapping")

    known = {"url", "nested_data", "annotated", "max_depth", "timeout"}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
    if "annotated" in data:
        data["annotated"] = _as_bool(data["annotated"])
    return ConnectorConfig(**data)


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"true", "1", "yes", "on"}
    return bool(value)
