"""
Base class for temporary stores.
"""

from abc import ABC, abstractmethod

import pandas as pd

from lapingest.config.settings import StorageBackend, StorageConfig
from lapingest.ingestion.types import Collection


class TempStore(ABC):
    """
    Abstract temporary store.

    Implementations must be safe to call from several threads; writes
    to the same collection are serialized by the orchestrator.
    """

    @abstractmethod
    def reset_temp_store(self) -> None:
        """Wipe every collection from the store."""
        ...

    @abstractmethod
    def write(self, collection: Collection, frame: pd.DataFrame) -> int:
        """
        Replace the stored records of a collection.

        Returns:
            Number of records written.
        """
        ...

    @abstractmethod
    def read(self, collection: Collection) -> pd.DataFrame | None:
        """Return the stored records of a collection, or None if absent."""
        ...

    @abstractmethod
    def collections(self) -> set[Collection]:
        """Collections currently present in the store."""
        ...


def create_store(config: StorageConfig) -> TempStore:
    """
    Create the temporary store selected by configuration.

    Args:
        config: Storage configuration.

    Returns:
        A ready-to-use store.
    """
    from lapingest.storage.memory import InMemoryTempStore
    from lapingest.storage.parquet import ParquetTempStore

    if config.backend == StorageBackend.PARQUET:
        if config.path is None:
            msg = "storage.path is required for the parquet backend"
            raise ValueError(msg)
        return ParquetTempStore(config.path)
    return InMemoryTempStore()
