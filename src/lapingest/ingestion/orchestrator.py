"""
Collection load orchestrator.

Decides which collections have to be (re)loaded into the temporary
store, dispatches them to the configured handlers and records the
outcome in the load state.
"""

import contextvars
import uuid
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field, replace

from lapingest.config.settings import IngestConfig, SourceConfig
from lapingest.errors import PartialLoadFailure, ResetFailure
from lapingest.ingestion.registry import HandlerRegistry
from lapingest.ingestion.state import LoadState
from lapingest.ingestion.types import Collection, LoadResult, SourceType
from lapingest.storage.base import TempStore, create_store
from lapingest.utils.logging import get_logger, log_context

log = get_logger(__name__)

CollectionRequest = Iterable[Collection | str] | None


@dataclass
class LoadReport:
    """
    Result of one load call.

    Attributes:
        loaded: Collections successfully loaded by this call, including
            joined loads of other callers that succeeded.
        failures: Failed collection -> result carrying the cause.
        results: Every result this call observed.
        plan: Collections this call dispatched itself, canonical order.
        joined: Collections loaded on this call's behalf by another caller.
    """

    loaded: set[Collection] = field(default_factory=set)
    failures: dict[Collection, LoadResult] = field(default_factory=dict)
    results: dict[Collection, LoadResult] = field(default_factory=dict)
    plan: list[Collection] = field(default_factory=list)
    joined: set[Collection] = field(default_factory=set)

    @property
    def ok(self) -> bool:
        """Whether no collection failed."""
        return not self.failures

    @property
    def records(self) -> int:
        """Total records ingested by successful loads."""
        return sum(r.records for r in self.results.values() if r.success)

    def add(self, results: Iterable[LoadResult]) -> None:
        """Fold results into the report."""
        for result in results:
            self.results[result.collection] = result
            if result.success:
                self.loaded.add(result.collection)
                self.failures.pop(result.collection, None)
            else:
                self.failures[result.collection] = result

    def raise_for_failures(self) -> None:
        """
        Raise if any collection failed.

        Raises:
            PartialLoadFailure: Listing the failed collections and causes.
        """
        if self.failures:
            raise PartialLoadFailure(self.loaded, self.failures)


class LoadOrchestrator:
    """
    Loads input collections into the temporary store on demand.

    Each call computes its plan from the current load state, so a
    retried call only re-attempts collections that are not loaded yet.
    Safe to call from many threads at once.
    """

    def __init__(
        self,
        config: IngestConfig,
        store: TempStore | None = None,
        *,
        registry: HandlerRegistry | None = None,
        state: LoadState | None = None,
    ) -> None:
        """
        Initialize orchestrator.

        Args:
            config: Ingestion configuration (sources, loading options).
            store: Temporary store. Built from `config.storage` if omitted.
            registry: Handler registry. Built-in handlers if omitted.
            state: Load state. A fresh, empty state if omitted.
        """
        self.config = config
        self.store = store if store is not None else create_store(config.storage)
        self.registry = registry if registry is not None else HandlerRegistry()
        self.state = state if state is not None else LoadState()
        log.info(
            "Orchestrator initialized",
            project=config.project,
            sources=[s.type for s in config.sources],
        )

    def is_loaded(self, collection: Collection | str) -> bool:
        """Whether a collection is loaded in the temporary store."""
        return self.state.is_loaded(Collection.parse(collection))

    def loaded_collections(self) -> set[Collection]:
        """All collections currently loaded."""
        return self.state.snapshot_loaded()

    def loaded_source_types(self) -> set[SourceType]:
        """All source types that have contributed a load."""
        return self.state.loaded_source_types()

    def source_for(self, collection: Collection) -> SourceConfig | None:
        """Source configured for a collection."""
        return self.config.source_for(collection)

    def load_collections(
        self,
        reload_data: bool = False,
        reset_store: bool = False,
        requested: CollectionRequest = None,
    ) -> set[Collection]:
        """
        Load the collections needed by the pipeline.

        Args:
            reload_data: Reload collections even if already loaded.
            reset_store: Wipe the temporary store (and load state) first.
            requested: Collections to load. Empty means all of them,
                None means none.

        Returns:
            Collections successfully loaded by this call (empty if none).

        Raises:
            InvalidArgumentError: If a requested label is not a collection.
            ResetFailure: If the temporary store could not be wiped.
        """
        return self.load(reload_data, reset_store, requested).loaded

    def load(
        self,
        reload_data: bool = False,
        reset_store: bool = False,
        requested: CollectionRequest = None,
    ) -> LoadReport:
        """
        Same as `load_collections`, returning the full report.

        Failed collections are listed in `LoadReport.failures`; use
        `raise_for_failures()` to turn them into an exception.
        """
        with log_context(load_id=uuid.uuid4().hex[:8]):
            # Parse before touching the store so bad labels have no side effects
            candidates = None if requested is None else self._candidates(requested)

            if reset_store:
                self.reset_store()

            if candidates is None:
                log.info("No collections will be loaded (no collections requested)")
                return LoadReport()

            claims = self.state.claim(candidates, reload=reload_data)
            report = LoadReport(plan=claims.plan, joined=set(claims.joined))
            if not claims:
                log.info(
                    "No collections to load (already loaded)",
                    requested=[c.name for c in candidates],
                )
                return report

            log.info(
                "Loading collections",
                plan=[c.name for c in report.plan],
                joined=[c.name for c in Collection.ordered(list(report.joined))],
                reload=reload_data,
            )

            results: dict[Collection, LoadResult] = {}
            try:
                results = self._dispatch(report.plan)
            finally:
                committed = self.state.commit(claims, results)
            report.add(committed.values())

            if claims.joined:
                report.add(self.state.wait_for(claims.joined).values())

            if report.failures:
                log.warning(
                    "Some collections failed to load",
                    loaded=[c.name for c in Collection.ordered(list(report.loaded))],
                    failed={c.name: r.error for c, r in report.failures.items()},
                )
            else:
                log.info(
                    "Input collections loaded",
                    loaded=[c.name for c in Collection.ordered(list(report.loaded))],
                    records=report.records,
                )
            return report

    def reset_store(self) -> None:
        """
        Wipe the temporary store and forget every loaded collection.

        Waits for in-flight loads to finish and keeps new ones out until
        the wipe is done.

        Raises:
            ResetFailure: If the store could not be wiped. The load state is
                cleared anyway since the store may be partially wiped.
        """
        with self.state.exclusive():
            try:
                self.store.reset_temp_store()
            except Exception as e:
                self.state.reset()
                log.error("Temporary store reset failed", error=str(e))
                msg = f"Temporary store reset failed: {e}"
                raise ResetFailure(msg) from e
            self.state.reset()

    @staticmethod
    def _candidates(requested: Iterable[Collection | str]) -> list[Collection]:
        """Expand a request to the candidate collections, in canonical order."""
        if isinstance(requested, str | Collection):
            requested = [requested]
        items = list(requested)
        if not items:
            return list(Collection)
        return Collection.ordered([Collection.parse(item) for item in items])

    def _dispatch(self, plan: list[Collection]) -> dict[Collection, LoadResult]:
        """
        Dispatch a plan to its handlers, one batch per configured source.

        Returns:
            Collection -> result for every collection in the plan.
        """
        results: dict[Collection, LoadResult] = {}
        batches: dict[int, tuple[SourceConfig, list[Collection]]] = {}
        for collection in plan:
            source = self.config.source_for(collection)
            if source is None:
                results[collection] = LoadResult.failed(
                    collection, f"no source configured for collection {collection.name}"
                )
                continue
            batches.setdefault(id(source), (source, []))[1].append(collection)

        if not batches:
            return results

        max_workers = min(self.config.loading.max_workers, len(batches))
        if max_workers == 1:
            for source, collections in batches.values():
                results.update(self._run_batch(source, collections))
            return results

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = {
                executor.submit(
                    contextvars.copy_context().run, self._run_batch, source, collections
                ): collections
                for source, collections in batches.values()
            }
            for future in as_completed(futures):
                try:
                    results.update(future.result())
                except Exception as e:
                    log.error("Batch worker failed", error=str(e))
                    error = f"{type(e).__name__}: {e}"
                    results.update({c: LoadResult.failed(c, error) for c in futures[future]})

        return results

    def _run_batch(
        self,
        source: SourceConfig,
        collections: list[Collection],
    ) -> dict[Collection, LoadResult]:
        """
        Run one handler over its collections.

        Construction, read or malformed-result failures fail every
        collection of the batch and nothing else.
        """
        try:
            handler = self.registry.resolve(source.type, source, self.config, self.store)
        except Exception as e:
            log.error("Cannot create handler", source_type=source.type, error=str(e))
            return {c: LoadResult.failed(c, str(e)) for c in collections}

        source_type: SourceType | None = None
        try:
            source_type = handler.source_type
            with handler:
                raw = handler.read(collections)

            results: dict[Collection, LoadResult] = {}
            for collection in collections:
                result = raw.get(collection)
                if result is None:
                    result = LoadResult.failed(
                        collection, "no result reported by handler", source_type=source_type
                    )
                elif result.collection != collection or result.source_type is None:
                    result = replace(
                        result,
                        collection=collection,
                        source_type=result.source_type or source_type,
                    )
                results[collection] = result
            return results
        except Exception as e:
            log.error(
                "Handler failed",
                source_type=source.type,
                collections=[c.name for c in collections],
                error=str(e),
            )
            error = f"{type(e).__name__}: {e}"
            return {c: LoadResult.failed(c, error, source_type=source_type) for c in collections}
