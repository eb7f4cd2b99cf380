"""Exception hierarchy for the citation registry.

All errors raised by key derivation, the registry and citation aggregation
derive from CitationRegistryError so callers can catch them with a single
except clause.
"""

from typing import Optional, Sequence


class CitationRegistryError(Exception):
    """Base exception for all citation registry errors.

    Attributes:
        message: Human-readable error description.
        cause: Original exception that caused this error (optional).
    """

    def __init__(self, message: str, cause: Optional[Exception] = None):
        self.message = message
        self.cause = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause


class CapacityExceededError(CitationRegistryError):
    """Raised when adding a reference to a registry that is already full."""

    def __init__(self, capacity: int):
        super().__init__(
            f"Citation registry is full ({capacity} references); "
            f"increase MAX_REFERENCES"
        )
        self.capacity = capacity


class KeyDerivationError(CitationRegistryError):
    """Raised when no citation key can be derived from a record.

    Attributes:
        record: The offending tagged record.
    """

    def __init__(self, message: str, record: Optional[Sequence[str]] = None):
        super().__init__(message)
        self.record = tuple(record) if record is not None else ()


class MissingAuthorError(KeyDerivationError):
    """The record has no first author."""


class InvalidYearError(KeyDerivationError):
    """The record's publication year is not exactly four characters."""

    def __init__(self, year: str, record: Optional[Sequence[str]] = None):
        super().__init__(f"Publication year must have 4 characters, got {year!r}", record)
        self.year = year


class DegenerateKeyError(KeyDerivationError):
    """No usable key: too few alphanumeric characters survive filtering of
    author + year, or the candidate has run out of suffix letters."""

    def __init__(
        self,
        candidate: str,
        record: Optional[Sequence[str]] = None,
        message: Optional[str] = None,
    ):
        super().__init__(
            message or f"Citation key {candidate!r} is too short after removing special characters",
            record,
        )
        self.candidate = candidate


class InvalidHandleError(CitationRegistryError, IndexError):
    """Raised when a handle outside [1, count] is passed to the registry."""

    def __init__(self, handle: int, count: int):
        super().__init__(f"Reference handle {handle} out of range [1, {count}]")
        self.handle = handle
        self.count = count


class AggregationMismatchError(CitationRegistryError):
    """Raised when workers disagree on the shape of a collective call."""
