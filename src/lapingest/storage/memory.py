"""In-process temporary store holding one DataFrame per collection."""

import threading

import pandas as pd

from lapingest.ingestion.types import Collection
from lapingest.storage.base import TempStore
from lapingest.utils.logging import get_logger

log = get_logger(__name__)


class InMemoryTempStore(TempStore):
    """Temporary store backed by a lock-guarded dict."""

    def __init__(self) -> None:
        self._frames: dict[Collection, pd.DataFrame] = {}
        self._lock = threading.Lock()

    def reset_temp_store(self) -> None:
        with self._lock:
            count = len(self._frames)
            self._frames.clear()
        log.info("Temporary store reset", backend="memory", collections_removed=count)

    def write(self, collection: Collection, frame: pd.DataFrame) -> int:
        with self._lock:
            self._frames[collection] = frame.copy()
        log.debug("Stored collection", collection=collection.name, rows=len(frame))
        return len(frame)

    def read(self, collection: Collection) -> pd.DataFrame | None:
        with self._lock:
            frame = self._frames.get(collection)
        return None if frame is None else frame.copy()

    def collections(self) -> set[Collection]:
        with self._lock:
            return set(self._frames)
