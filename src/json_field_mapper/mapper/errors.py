"""Error taxonomy for the json field mapper."""

from __future__ import annotations


class MapperError(Exception):
    """Base error for the json field mapper."""


class MapperParsingError(MapperError, ValueError):
    """Raised when the token stream is malformed or truncated."""

    def __init__(self, message: str, location: str | None = None) -> None:
        self.location = location
        if location:
            message = f"{message} at {location}"
        super().__init__(message)


class ReservedCharacterError(MapperParsingError):
    """Raised when an object key contains the reserved separator."""


class MappingConfigError(MapperError, ValueError):
    """Raised when a field mapping requests an invalid or disallowed setting."""


class UnsupportedQueryError(MapperError):
    """Raised when a query kind cannot be built against a json field."""


class FrozenFieldTypeError(MapperError, RuntimeError):
    """Raised when a finalized builder is mutated."""


class MergeConflictError(MapperError):
    """Raised when two mappings cannot be merged."""
