"""
Base class for input handlers.

A handler reads one or more collections from its source and writes them
into the temporary store. It reports a LoadResult per collection and
never touches the orchestrator's load state.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from types import TracebackType
from typing import ClassVar

import pandas as pd

from lapingest.config.settings import IngestConfig, SourceConfig
from lapingest.ingestion.types import Collection, InputKind, LoadResult, SourceType
from lapingest.schemas.registry import SchemaRegistry
from lapingest.storage.base import TempStore
from lapingest.utils.logging import get_logger

log = get_logger(__name__)


class InputHandler(ABC):
    """
    Abstract base class for input handlers.

    Subclasses declare `source_type` and `input_kind` and implement
    `_read_collection`. Handlers are context managers: `open()` runs on
    entry and `close()` is guaranteed on exit, whatever the outcome.
    """

    source_type: ClassVar[SourceType]
    input_kind: ClassVar[InputKind]

    def __init__(
        self,
        source_config: SourceConfig,
        config: IngestConfig,
        store: TempStore,
    ) -> None:
        """
        Initialize input handler.

        Args:
            source_config: Settings of the source this handler reads.
            config: Shared process configuration.
            store: Temporary store the collections are written to.
        """
        self.source_config = source_config
        self.config = config
        self.store = store

    @property
    def settings(self) -> dict:
        """Free-form settings of the source."""
        return self.source_config.settings

    def open(self) -> None:
        """Acquire I/O resources. No-op by default."""

    def close(self) -> None:
        """Release I/O resources. No-op by default."""

    def __enter__(self) -> "InputHandler":
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @abstractmethod
    def _read_collection(self, collection: Collection) -> pd.DataFrame:
        """Read the raw records of one collection. Implemented by subclasses."""
        ...

    def read(self, collections: Sequence[Collection]) -> dict[Collection, LoadResult]:
        """
        Read collections and write them to the temporary store.

        A collection is reported successful only once its write returned.
        A failure is confined to its own collection.

        Args:
            collections: Collections to read, in the order to read them.

        Returns:
            Collection -> result for every requested collection.
        """
        results: dict[Collection, LoadResult] = {}
        for collection in collections:
            results[collection] = self._load_one(collection)
        return results

    def _load_one(self, collection: Collection) -> LoadResult:
        log.info(
            "Reading collection",
            handler=self.__class__.__name__,
            collection=collection.name,
        )
        try:
            df = self._read_collection(collection)
            if self.config.loading.validate_schemas:
                df = SchemaRegistry.validate(df, collection)
            records = self.store.write(collection, df)
        except Exception as e:
            log.warning(
                "Collection read failed",
                handler=self.__class__.__name__,
                collection=collection.name,
                error=str(e),
            )
            return LoadResult.failed(collection, str(e), source_type=self.source_type)

        log.info("Collection stored", collection=collection.name, rows=records)
        return LoadResult.ok(collection, records, source_type=self.source_type)
