"""Field types, aggregations and the descriptors built from them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union


class SemanticType(str, Enum):
    """Semantic field types understood by the reporting host."""

    NUMBER = "NUMBER"
    PERCENT = "PERCENT"
    TEXT = "TEXT"
    BOOLEAN = "BOOLEAN"
    URL = "URL"
    HYPERLINK = "HYPERLINK"
    IMAGE = "IMAGE"
    IMAGELINK = "IMAGELINK"
    YEAR = "YEAR"
    YEAR_QUARTER = "YEAR_QUARTER"
    YEAR_MONTH = "YEAR_MONTH"
    YEAR_WEEK = "YEAR_WEEK"
    YEAR_MONTH_DAY = "YEAR_MONTH_DAY"
    YEAR_MONTH_DAY_HOUR = "YEAR_MONTH_DAY_HOUR"
    YEAR_MONTH_DAY_SECOND = "YEAR_MONTH_DAY_SECOND"
    QUARTER = "QUARTER"
    MONTH = "MONTH"
    WEEK = "WEEK"
    MONTH_DAY = "MONTH_DAY"
    DAY_OF_WEEK = "DAY_OF_WEEK"
    DAY = "DAY"
    HOUR = "HOUR"
    MINUTE = "MINUTE"
    DURATION = "DURATION"
    COUNTRY = "COUNTRY"
    COUNTRY_CODE = "COUNTRY_CODE"
    CONTINENT = "CONTINENT"
    CONTINENT_CODE = "CONTINENT_CODE"
    SUB_CONTINENT = "SUB_CONTINENT"
    SUB_CONTINENT_CODE = "SUB_CONTINENT_CODE"
    REGION = "REGION"
    REGION_CODE = "REGION_CODE"
    CITY = "CITY"
    CITY_CODE = "CITY_CODE"
    METRO = "METRO"
    METRO_CODE = "METRO_CODE"
    LATITUDE_LONGITUDE = "LATITUDE_LONGITUDE"


class Aggregation(str, Enum):
    AVG = "AVG"
    COUNT = "COUNT"
    COUNT_DISTINCT = "COUNT_DISTINCT"
    MAX = "MAX"
    MIN = "MIN"
    SUM = "SUM"
    AUTO = "AUTO"
    NONE = "NONE"


class SchemaMode(str, Enum):
    """How field types are derived: sniffed from values or read from annotations."""

    HEURISTIC = "heuristic"
    ANNOTATED = "annotated"


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """One output column of the flattened table."""

    id: str
    name: str
    description: str = ""
    semantic_type: SemanticType = SemanticType.TEXT
    aggregation: Optional[Aggregation] = None

    @property
    def is_metric(self) -> bool:
        return self.semantic_type is SemanticType.NUMBER

    def to_dict(self) -> dict[str, Any]:
        """Render the descriptor as a host schema entry."""

        if self.semantic_type is SemanticType.NUMBER:
            data_type = "NUMBER"
        elif self.semantic_type is SemanticType.BOOLEAN:
            data_type = "BOOLEAN"
        else:
            data_type = "STRING"

        entry: dict[str, Any] = {
            "name": self.id,
            "label": self.name,
            "description": self.description,
            "dataType": data_type,
            "semantics": {
                "conceptType": "METRIC" if self.is_metric else "DIMENSION",
                "semanticType": self.semantic_type.value,
            },
        }
        if self.aggregation is not None:
            entry["defaultAggregationType"] = self.aggregation.value
        return entry


@dataclass(frozen=True, slots=True)
class HeuristicField:
    """A leaf found while walking a sample record; its type is sniffed from `value`."""

    path: tuple[str, ...]
    value: Any


@dataclass(frozen=True, slots=True)
class AnnotatedField:
    """A field declared with explicit metadata; `value` is never inspected."""

    key: str
    name: str
    description: str
    type_tag: str
    aggregation: Optional[str] = None
    value: Any = None


FieldSource = Union[HeuristicField, AnnotatedField]
