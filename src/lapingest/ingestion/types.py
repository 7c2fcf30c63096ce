"""
Enumerations and result types shared by handlers and the orchestrator.
"""

from dataclasses import dataclass
from enum import Enum

from lapingest.errors import InvalidArgumentError, UnsupportedSourceTypeError


class Collection(Enum):
    """
    Data collections that can be loaded independently.

    Iteration order is the canonical load order.
    """

    PERSONAL = "personal"
    COURSE = "course"
    ENROLLMENT = "enrollment"
    GRADE = "grade"
    ACTIVITY = "activity"

    @classmethod
    def parse(cls, label: "str | Collection") -> "Collection":
        """
        Resolve a case-insensitive label to a collection.

        Raises:
            InvalidArgumentError: If the label matches no collection.
        """
        if isinstance(label, cls):
            return label
        key = str(label).strip().upper()
        if key in cls.__members__:
            return cls[key]
        valid = ", ".join(cls.__members__)
        msg = f"collection ({label!r}) does not match the valid collections: {valid}"
        raise InvalidArgumentError(msg)

    @classmethod
    def ordered(cls, collections: "set[Collection] | list[Collection]") -> list["Collection"]:
        """Return the given collections in canonical order, without duplicates."""
        wanted = set(collections)
        return [c for c in cls if c in wanted]


class SourceType(Enum):
    """Kinds of backend that supply data for one or more collections."""

    SAMPLE_CSV = "sample_csv"
    CSV = "csv"
    DATABASE = "database"
    HTTP = "http"

    @classmethod
    def parse(cls, label: "str | SourceType") -> "SourceType":
        """
        Resolve a source type label.

        Matching ignores case, treats '-' like '_' and accepts the
        legacy spelling 'samplecsv'.

        Raises:
            UnsupportedSourceTypeError: If the label matches no source type.
        """
        if isinstance(label, cls):
            return label
        key = str(label).strip().upper().replace("-", "_")
        key = _SOURCE_ALIASES.get(key, key)
        if key in cls.__members__:
            return cls[key]
        valid = ", ".join(cls.__members__)
        msg = f"source type ({label!r}) does not match the valid types: {valid}"
        raise UnsupportedSourceTypeError(msg)


_SOURCE_ALIASES = {"SAMPLECSV": "SAMPLE_CSV"}


class InputKind(Enum):
    """Coarse classification of what a handler consumes."""

    CSV = "csv"
    STORAGE = "storage"

    @classmethod
    def parse(cls, label: "str | InputKind") -> "InputKind":
        """
        Resolve a case-insensitive input kind label.

        Raises:
            InvalidArgumentError: If the label matches no input kind.
        """
        if isinstance(label, cls):
            return label
        key = str(label).strip().upper()
        if key in cls.__members__:
            return cls[key]
        valid = ", ".join(cls.__members__)
        msg = f"input type ({label!r}) does not match the valid types: {valid}"
        raise InvalidArgumentError(msg)


@dataclass(frozen=True)
class LoadResult:
    """
    Outcome of loading one collection.

    Attributes:
        collection: The collection the result is about.
        success: Whether the records were written to the temporary store.
        records: Number of records ingested.
        error: Failure detail, if any.
        source_type: Source type of the handler that produced the result.
    """

    collection: Collection
    success: bool
    records: int = 0
    error: str | None = None
    source_type: SourceType | None = None

    def __post_init__(self) -> None:
        if self.records < 0:
            msg = f"records must be >= 0, got {self.records}"
            raise ValueError(msg)

    @classmethod
    def ok(
        cls,
        collection: Collection,
        records: int,
        source_type: SourceType | None = None,
    ) -> "LoadResult":
        """Build a successful result."""
        return cls(collection, True, records=records, source_type=source_type)

    @classmethod
    def failed(
        cls,
        collection: Collection,
        error: str,
        source_type: SourceType | None = None,
    ) -> "LoadResult":
        """Build a failed result."""
        return cls(collection, False, error=error, source_type=source_type)
