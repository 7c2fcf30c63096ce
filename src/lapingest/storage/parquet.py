"""
File-backed temporary store.

Each collection is a single parquet file in the store directory, so a
reset is a matter of deleting those files.
"""

import threading
from pathlib import Path

import pandas as pd

from lapingest.ingestion.types import Collection
from lapingest.storage.base import TempStore
from lapingest.utils.logging import get_logger

log = get_logger(__name__)


class ParquetTempStore(TempStore):
    """Temporary store writing `<collection>.parquet` files to a directory."""

    def __init__(self, directory: Path) -> None:
        """
        Initialize the store.

        Args:
            directory: Directory holding the parquet files. Created if missing.
        """
        self.directory = directory
        self.directory.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def path_for(self, collection: Collection) -> Path:
        """Path of the parquet file for a collection."""
        return self.directory / f"{collection.value}.parquet"

    def reset_temp_store(self) -> None:
        count = 0
        with self._lock:
            for collection in Collection:
                path = self.path_for(collection)
                if path.exists():
                    path.unlink()
                    count += 1
            # Leftovers of interrupted writes
            for tmp_path in self.directory.glob("*.parquet.tmp"):
                tmp_path.unlink(missing_ok=True)
        log.info(
            "Temporary store reset",
            backend="parquet",
            path=str(self.directory),
            files_removed=count,
        )

    def write(self, collection: Collection, frame: pd.DataFrame) -> int:
        path = self.path_for(collection)
        # Readers only ever see a complete file
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            frame.to_parquet(tmp_path, index=False)
        except Exception:
            tmp_path.unlink(missing_ok=True)
            raise
        with self._lock:
            tmp_path.replace(path)
        log.debug("Stored collection", collection=collection.name, path=str(path), rows=len(frame))
        return len(frame)

    def read(self, collection: Collection) -> pd.DataFrame | None:
        path = self.path_for(collection)
        with self._lock:
            if not path.exists():
                return None
            return pd.read_parquet(path)

    def collections(self) -> set[Collection]:
        with self._lock:
            return {c for c in Collection if self.path_for(c).exists()}
