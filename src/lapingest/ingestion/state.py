"""
Collection load state.

Tracks which collections are loaded in the temporary store, which
source types contributed to them, and which collections are currently
being loaded. All transitions happen under one condition variable:

    not loaded --claim--> in flight --commit(success)--> loaded
                          in flight --commit(failure)--> not loaded
    loaded --reset--> not loaded

A collection is claimed atomically before any handler reads it, so two
callers never load the same collection at the same time. Claims are
taken in canonical collection order, which keeps callers that wait on
each other's claims from deadlocking.
"""

import threading
from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field

from lapingest.ingestion.types import Collection, LoadResult, SourceType
from lapingest.utils.logging import get_logger

log = get_logger(__name__)


@dataclass(eq=False)
class ClaimTicket:
    """An in-flight load of one collection."""

    collection: Collection
    done: bool = False
    result: LoadResult | None = None


@dataclass
class Claims:
    """
    Outcome of a claim.

    Attributes:
        claimed: Collections the caller now owns and must dispatch.
        joined: Collections in flight for another caller; their results
            are reused.
        skipped: Collections left out because they are already loaded.
    """

    claimed: dict[Collection, ClaimTicket] = field(default_factory=dict)
    joined: dict[Collection, ClaimTicket] = field(default_factory=dict)
    skipped: set[Collection] = field(default_factory=set)

    @property
    def plan(self) -> list[Collection]:
        """Claimed collections in canonical order."""
        return Collection.ordered(list(self.claimed))

    def __bool__(self) -> bool:
        return bool(self.claimed or self.joined)


class LoadState:
    """
    Concurrency-safe record of loaded collections and source types.

    Owned by a single orchestrator; handlers never modify it.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._loaded: dict[Collection, SourceType | None] = {}
        self._source_types: set[SourceType] = set()
        self._in_flight: dict[Collection, ClaimTicket] = {}
        self._exclusive = False

    def is_loaded(self, collection: Collection) -> bool:
        """Whether a collection is loaded."""
        with self._cond:
            return collection in self._loaded

    def snapshot_loaded(self) -> set[Collection]:
        """Point-in-time copy of the loaded collections."""
        with self._cond:
            return set(self._loaded)

    def loaded_source_types(self) -> set[SourceType]:
        """Point-in-time copy of the source types that contributed a load."""
        with self._cond:
            return set(self._source_types)

    def loaded_by(self, collection: Collection) -> SourceType | None:
        """Source type that loaded a collection, None if not loaded."""
        with self._cond:
            return self._loaded.get(collection)

    def in_flight(self) -> set[Collection]:
        """Collections currently claimed by some caller."""
        with self._cond:
            return set(self._in_flight)

    def mark_loaded(self, collection: Collection, source_type: SourceType | None) -> None:
        """Record a collection as loaded. Idempotent."""
        with self._cond:
            self._mark(collection, source_type)

    def _mark(self, collection: Collection, source_type: SourceType | None) -> None:
        self._loaded[collection] = source_type
        if source_type is not None:
            self._source_types.add(source_type)

    def reset(self) -> None:
        """Forget every loaded collection and source type."""
        with self._cond:
            count = len(self._loaded)
            self._loaded.clear()
            self._source_types.clear()
        log.info("Load state reset", collections_cleared=count)

    def claim(self, candidates: Iterable[Collection], *, reload: bool = False) -> Claims:
        """
        Atomically claim the collections a caller has to load.

        Without `reload`, loaded collections are skipped and collections
        in flight for another caller are joined. With `reload`, every
        candidate is claimed, waiting for a concurrent load of the same
        collection to finish first.

        Args:
            candidates: Collections the caller wants.
            reload: Whether to load collections that are already loaded.

        Returns:
            The claimed, joined and skipped collections.
        """
        claims = Claims()
        with self._cond:
            while self._exclusive:
                self._cond.wait()
            for collection in Collection.ordered(list(candidates)):
                if not reload and collection in self._loaded:
                    claims.skipped.add(collection)
                    continue
                ticket = self._in_flight.get(collection)
                if ticket is not None and not reload:
                    claims.joined[collection] = ticket
                    continue
                while collection in self._in_flight:
                    self._cond.wait()
                ticket = ClaimTicket(collection)
                self._in_flight[collection] = ticket
                claims.claimed[collection] = ticket
        if claims.joined:
            log.debug("Joined in-flight loads", collections=[c.name for c in claims.joined])
        return claims

    def commit(
        self,
        claims: Claims,
        results: Mapping[Collection, LoadResult],
    ) -> dict[Collection, LoadResult]:
        """
        Apply the results of a dispatch and release its claims.

        Claimed collections without a result are committed as failures.

        Args:
            claims: Claims returned by `claim`.
            results: Results reported for the claimed collections.

        Returns:
            Collection -> committed result for every claimed collection.
        """
        committed: dict[Collection, LoadResult] = {}
        with self._cond:
            for collection, ticket in claims.claimed.items():
                result = results.get(collection)
                if result is None:
                    result = LoadResult.failed(collection, "no result reported by handler")
                if result.success:
                    self._mark(collection, result.source_type)
                ticket.result = result
                ticket.done = True
                if self._in_flight.get(collection) is ticket:
                    del self._in_flight[collection]
                committed[collection] = result
            self._cond.notify_all()
        return committed

    def wait_for(self, tickets: Mapping[Collection, ClaimTicket]) -> dict[Collection, LoadResult]:
        """
        Block until joined loads finish and return their results.

        Args:
            tickets: Joined claims, as found in `Claims.joined`.

        Returns:
            Collection -> result of the load that was joined.
        """
        with self._cond:
            while not all(t.done for t in tickets.values()):
                self._cond.wait()
            return {
                collection: ticket.result
                or LoadResult.failed(collection, "no result reported by handler")
                for collection, ticket in tickets.items()
            }

    @contextmanager
    def exclusive(self) -> Iterator[None]:
        """
        Run a block with no load in flight.

        New claims block until the block exits; claims already taken are
        allowed to finish first. Must not be entered by a caller holding
        claims.
        """
        with self._cond:
            while self._exclusive:
                self._cond.wait()
            self._exclusive = True
        try:
            with self._cond:
                while self._in_flight:
                    self._cond.wait()
            yield
        finally:
            with self._cond:
                self._exclusive = False
                self._cond.notify_all()
