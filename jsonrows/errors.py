"""Exceptions surfaced to the connector's caller."""

from __future__ import annotations

from typing import Optional


class ConnectorError(RuntimeError):
    """Base class for errors whose message is meant for the end user."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class SchemaError(ConnectorError):
    """Raised when a field schema cannot be derived from the document."""


class InvalidRootShape(SchemaError):
    def __init__(self, message: str = "Invalid JSON format") -> None:
        super().__init__(message)


class UnidentifiableField(SchemaError):
    def __init__(self, key: Optional[str], detail: Optional[str] = None) -> None:
        message = "Unable to identify the data format of one of your fields."
        if key is not None:
            message = f'Unable to identify the data format of field "{key}".'
        if detail:
            message = f"{message} {detail}"
        super().__init__(message)
        self.key = key


class ModeMismatch(ConnectorError):
    """Raised when rows are requested under a different mode than the schema was built with."""

    def __init__(self, described: str, requested: str) -> None:
        super().__init__(
            f"Schema was described in {described} mode but data was requested in {requested} mode."
        )
        self.described = described
        self.requested = requested


class UnknownField(ConnectorError):
    def __init__(self, field_id: str) -> None:
        super().__init__(f'Requested field "{field_id}" is not part of the schema.')
        self.field_id = field_id


class FetchError(ConnectorError):
    """Raised when the source document cannot be fetched or parsed."""

    def __init__(self, message: str, *, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.url = url


class InvalidMode(ConnectorError):
    def __init__(self, value: object) -> None:
        super().__init__(f'Unknown schema mode "{value}"; expected "heuristic" or "annotated".')
        self.value = value
