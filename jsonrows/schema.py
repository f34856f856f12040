"""Field schema derivation from a sample record or from field annotations."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator, Mapping, Optional

from jsonschema import ValidationError, validate

from .classify import classify_field
from .errors import ConnectorError, InvalidRootShape, UnidentifiableField, UnknownField
from .keys import element_key, segment_key
from .schemas import ANNOTATED_FIELD_SCHEMA
from .types import (
    Aggregation,
    AnnotatedField,
    FieldDescriptor,
    FieldSource,
    HeuristicField,
    SchemaMode,
    SemanticType,
)


logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 32


class Schema:
    """Ordered set of field descriptors keyed by id.

    Adding a descriptor whose id is already present replaces the earlier one,
    so when two raw keys normalize to the same id the later key wins.
    """

    def __init__(self, mode: SchemaMode = SchemaMode.HEURISTIC) -> None:
        self.mode = mode
        self._fields: dict[str, FieldDescriptor] = {}

    def add(self, descriptor: FieldDescriptor) -> None:
        if descriptor.id in self._fields:
            logger.debug("Field id %r redefined; keeping the later definition", descriptor.id)
        self._fields[descriptor.id] = descriptor

    @property
    def ids(self) -> list[str]:
        return list(self._fields)

    def get(self, field_id: str) -> Optional[FieldDescriptor]:
        return self._fields.get(field_id)

    def for_ids(self, field_ids: Iterable[str]) -> list[FieldDescriptor]:
        """Return descriptors for `field_ids`, in the requested order."""

        selected: list[FieldDescriptor] = []
        for field_id in field_ids:
            descriptor = self._fields.get(field_id)
            if descriptor is None:
                raise UnknownField(field_id)
            selected.append(descriptor)
        return selected

    def build(self) -> list[dict[str, Any]]:
        return [descriptor.to_dict() for descriptor in self._fields.values()]

    def __iter__(self) -> Iterator[FieldDescriptor]:
        return iter(list(self._fields.values()))

    def __len__(self) -> int:
        return len(self._fields)

    def __contains__(self, field_id: object) -> bool:
        return field_id in self._fields

    def __getitem__(self, field_id: str) -> FieldDescriptor:
        return self._fields[field_id]


def build_schema(
    sample: Any,
    mode: SchemaMode,
    annotations: Optional[Mapping[str, Any]] = None,
    *,
    inline: bool = True,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Schema:
    """Derive the field schema for a document.

    In heuristic mode the sample record is walked and every leaf is sniffed.
    In annotated mode each entry of `annotations` (the sample itself when
    omitted) declares one field directly.
    """

    if mode is SchemaMode.ANNOTATED:
        source = sample if annotations is None else annotations
        if not isinstance(source, Mapping):
            raise InvalidRootShape()
        return _annotated_schema(source)

    if not isinstance(sample, Mapping):
        raise InvalidRootShape()
    return _heuristic_schema(sample, inline=inline, max_depth=max_depth)


def resolve_aggregation(
    semantic_type: SemanticType, declared: Optional[str] = None
) -> Optional[Aggregation]:
    """Pick the default aggregation; only numeric fields aggregate, NONE falls back to SUM."""

    if semantic_type is not SemanticType.NUMBER:
        return None
    if declared is None:
        return Aggregation.SUM
    try:
        aggregation = Aggregation(str(declared).strip().upper())
    except ValueError:
        logger.warning("Unknown aggregation %r; defaulting to SUM", declared)
        return Aggregation.SUM
    if aggregation is Aggregation.NONE:
        return Aggregation.SUM
    return aggregation


def make_descriptor(field_id: str, source: FieldSource) -> FieldDescriptor:
    semantic_type = classify_field(source)
    if isinstance(source, AnnotatedField):
        return FieldDescriptor(
            id=field_id,
            name=source.name,
            description=source.description,
            semantic_type=semantic_type,
            aggregation=resolve_aggregation(semantic_type, source.aggregation),
        )
    return FieldDescriptor(
        id=field_id,
        name=".".join(source.path),
        semantic_type=semantic_type,
        aggregation=resolve_aggregation(semantic_type),
    )


def _heuristic_schema(sample: Mapping[str, Any], *, inline: bool, max_depth: int) -> Schema:
    schema = Schema(SchemaMode.HEURISTIC)
    # Each frame: (parent id, raw key path, remaining items, depth).
    stack: list[tuple[Optional[str], tuple[str, ...], Iterator[tuple[Any, Any]], int]] = [
        (None, (), iter(sample.items()), 1)
    ]

    while stack:
        parent_id, parent_path, items, depth = stack[-1]
        entry = next(items, None)
        if entry is None:
            stack.pop()
            continue

        key, value = entry
        key = str(key)
        try:
            field_id = element_key(parent_id, key)
            if not field_id:
                logger.debug("Skipping empty key under %r", parent_id)
                continue
            path = parent_path + (key,)

            if inline and isinstance(value, Mapping):
                if depth < max_depth:
                    stack.append((field_id, path, iter(value.items()), depth + 1))
                    continue
                logger.warning(
                    "Field %r is nested deeper than %s levels; keeping it as one column",
                    field_id,
                    max_depth,
                )

            descriptor = make_descriptor(field_id, HeuristicField(path=path, value=value))
        except ConnectorError:
            raise
        except Exception as error:
            raise UnidentifiableField(key) from error

        schema.add(descriptor)

    return schema


def _annotated_schema(annotations: Mapping[str, Any]) -> Schema:
    schema = Schema(SchemaMode.ANNOTATED)

    for key, spec in annotations.items():
        key = str(key)
        try:
            validate(instance=spec, schema=ANNOTATED_FIELD_SCHEMA)
        except ValidationError as exc:
            raise UnidentifiableField(key, exc.message) from exc

        field_id = segment_key(key)
        if not field_id:
            raise UnidentifiableField(key, "Field names must not be empty.")

        source = AnnotatedField(
            key=key,
            name=spec.get("name") or key,
            description=spec.get("description") or "",
            type_tag=spec["type"],
            aggregation=spec.get("aggregation"),
            value=spec.get("value"),
        )
        schema.add(make_descriptor(field_id, source))

    return schema
