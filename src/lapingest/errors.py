"""
Error kinds raised by the ingestion layer.

InvalidArgumentError and UnsupportedSourceTypeError also derive from
ValueError so callers that only know about builtin exceptions still
catch bad labels.
"""

from collections.abc import Mapping
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lapingest.ingestion.types import Collection, LoadResult


class IngestError(Exception):
    """Base class for all ingestion errors."""


class InvalidArgumentError(IngestError, ValueError):
    """An unrecognized collection or input kind label."""


class UnsupportedSourceTypeError(IngestError, ValueError):
    """The registry cannot construct a handler for a source type."""


class ResetFailure(IngestError):
    """The temporary store could not be wiped."""


class PartialLoadFailure(IngestError):
    """
    One or more collections of a load failed while others may have succeeded.

    Attributes:
        loaded: Collections successfully loaded by the same call.
        failures: Failed collection -> result carrying the cause.
    """

    def __init__(
        self,
        loaded: "set[Collection]",
        failures: "Mapping[Collection, LoadResult]",
    ) -> None:
        self.loaded = set(loaded)
        self.failures = dict(failures)
        details = "; ".join(
            f"{collection.name}: {result.error or 'unknown error'}"
            for collection, result in self.failures.items()
        )
        super().__init__(f"{len(self.failures)} collection(s) failed to load ({details})")
