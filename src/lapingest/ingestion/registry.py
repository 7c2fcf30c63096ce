"""
Handler registry mapping source types to handler factories.

New source types are added by registration, the resolve logic never
changes.
"""

from collections.abc import Callable, Mapping

from lapingest.config.settings import IngestConfig, SourceConfig
from lapingest.errors import UnsupportedSourceTypeError
from lapingest.ingestion.base import InputHandler
from lapingest.ingestion.csv_files import CSVInputHandler, SampleCSVInputHandler
from lapingest.ingestion.types import Collection, SourceType
from lapingest.storage.base import TempStore

HandlerFactory = Callable[[SourceConfig, IngestConfig, TempStore], InputHandler]

BUILTIN_HANDLERS: dict[SourceType, HandlerFactory] = {
    SourceType.SAMPLE_CSV: SampleCSVInputHandler,
    SourceType.CSV: CSVInputHandler,
}


class HandlerRegistry:
    """
    Registry of handler factories, seeded with the built-in CSV handlers.
    """

    def __init__(self, registrations: Mapping[SourceType, HandlerFactory] | None = None) -> None:
        """
        Initialize registry.

        Args:
            registrations: Extra or overriding factories per source type.
        """
        self._registrations: dict[SourceType, HandlerFactory] = dict(BUILTIN_HANDLERS)
        if registrations:
            self._registrations.update(registrations)

    def register(self, source_type: SourceType | str, factory: HandlerFactory) -> None:
        """Register (or replace) the factory for a source type."""
        self._registrations[SourceType.parse(source_type)] = factory

    def is_registered(self, source_type: SourceType) -> bool:
        """Whether a factory exists for a source type."""
        return source_type in self._registrations

    def factory_for(self, source_type: SourceType) -> HandlerFactory | None:
        """Registered factory for a source type, if any."""
        return self._registrations.get(source_type)

    def supported_types(self) -> list[SourceType]:
        """Registered source types in declaration order."""
        return [t for t in SourceType if t in self._registrations]

    def resolve(
        self,
        source_type: SourceType | str,
        source_config: SourceConfig,
        config: IngestConfig,
        store: TempStore,
    ) -> InputHandler:
        """
        Construct the handler for a source type.

        Args:
            source_type: Source type or its label.
            source_config: Settings of the source.
            config: Shared process configuration.
            store: Temporary store handlers write to.

        Returns:
            A new handler instance.

        Raises:
            UnsupportedSourceTypeError: If the label is unknown or no
                factory is registered for the type.
        """
        resolved = SourceType.parse(source_type)
        factory = self._registrations.get(resolved)
        if factory is None:
            allowed = ", ".join(t.name for t in self.supported_types())
            msg = f"No handler registered for source type {resolved.name}. Supported: {allowed}"
            raise UnsupportedSourceTypeError(msg)
        return factory(source_config, config, store)

    @staticmethod
    def parse_collection(label: str | Collection) -> Collection:
        """
        Resolve a collection label.

        Raises:
            InvalidArgumentError: If the label matches no collection.
        """
        return Collection.parse(label)
