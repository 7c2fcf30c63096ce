"""Test doubles shared by the test modules."""

import threading
import time
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field

import pandas as pd

from lapingest.config.settings import IngestConfig, SourceConfig
from lapingest.ingestion.base import InputHandler
from lapingest.ingestion.types import Collection, InputKind, LoadResult, SourceType
from lapingest.storage.base import TempStore


@dataclass
class StubSource:
    """
    Scriptable source backing StubHandler instances.

    Records every read so tests can count handler invocations.
    """

    source_type: SourceType = SourceType.CSV
    records: int = 10
    failing: set[Collection] = field(default_factory=set)
    explode: bool = False
    delay: float = 0.0
    calls: list[tuple[Collection, ...]] = field(default_factory=list)
    opened: int = 0
    closed: int = 0
    max_active: int = 0
    started: threading.Event = field(default_factory=threading.Event)
    _active: Counter = field(default_factory=Counter)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def factory(
        self, source_config: SourceConfig, config: IngestConfig, store: TempStore
    ) -> InputHandler:
        return StubHandler(self, source_config, config, store)

    def reads_of(self, collection: Collection) -> int:
        """Number of handler reads that included a collection."""
        return sum(call.count(collection) for call in self.calls)


class StubHandler(InputHandler):
    """Handler producing synthetic frames as scripted by a StubSource."""

    source_type = SourceType.CSV
    input_kind = InputKind.CSV

    def __init__(
        self,
        stub: StubSource,
        source_config: SourceConfig,
        config: IngestConfig,
        store: TempStore,
    ) -> None:
        super().__init__(source_config, config, store)
        self.stub = stub
        self.source_type = stub.source_type

    def open(self) -> None:
        with self.stub._lock:
            self.stub.opened += 1

    def close(self) -> None:
        with self.stub._lock:
            self.stub.closed += 1

    def read(self, collections: Sequence[Collection]) -> dict[Collection, LoadResult]:
        stub = self.stub
        with stub._lock:
            stub.calls.append(tuple(collections))
            for c in collections:
                stub._active[c] += 1
                stub.max_active = max(stub.max_active, stub._active[c])
        stub.started.set()
        try:
            if stub.delay:
                time.sleep(stub.delay)
            if stub.explode:
                msg = "connection reset by source"
                raise ConnectionError(msg)
            return super().read(collections)
        finally:
            with stub._lock:
                for c in collections:
                    stub._active[c] -= 1

    def _read_collection(self, collection: Collection) -> pd.DataFrame:
        if collection in self.stub.failing:
            msg = f"{collection.name} source unavailable"
            raise RuntimeError(msg)
        n = self.stub.records
        return pd.DataFrame(
            {
                "ALTERNATIVE_ID": [f"{i:06d}" for i in range(n)],
                "COURSE_ID": ["MATH-101-01"] * n,
            }
        )
