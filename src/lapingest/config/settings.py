"""
Typed configuration models using Pydantic.

All configuration is defined here with explicit typing and validation.
Source types stay plain strings at this level: an unsupported type only
fails the collections of that source when a load is dispatched.
"""

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from lapingest.ingestion.types import Collection


class StorageBackend(str, Enum):
    """Implementation backing the temporary store."""

    MEMORY = "memory"
    PARQUET = "parquet"  # One parquet file per collection under `path`


class StorageConfig(BaseModel):
    """Temporary store configuration."""

    model_config = ConfigDict(frozen=True)

    backend: StorageBackend = Field(
        default=StorageBackend.MEMORY,
        description="Temporary store implementation",
    )
    path: Path | None = Field(
        default=None,
        description="Directory for the parquet backend",
    )

    @model_validator(mode="after")
    def validate_path(self) -> "StorageConfig":
        """Ensure the parquet backend has a directory."""
        if self.backend == StorageBackend.PARQUET and self.path is None:
            msg = "storage.path is required for the parquet backend"
            raise ValueError(msg)
        return self


class SourceConfig(BaseModel):
    """One configured input source.

    An empty `collections` list means the source serves every collection
    not claimed by a more specific source.
    """

    model_config = ConfigDict(frozen=True)

    type: str = Field(description="Source type label (e.g. 'samplecsv', 'csv')")
    collections: tuple[Collection, ...] = Field(
        default=(),
        description="Collections read from this source",
    )
    settings: dict[str, Any] = Field(
        default_factory=dict,
        description="Free-form settings scoped to this source",
    )

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: str) -> str:
        """Ensure the type label is not blank."""
        if not v.strip():
            msg = "source type must not be empty"
            raise ValueError(msg)
        return v.strip()

    @field_validator("collections", mode="before")
    @classmethod
    def parse_collections(cls, v: Any) -> tuple[Collection, ...]:
        """Accept collection labels in any case."""
        if v is None:
            return ()
        if isinstance(v, str | Collection):
            v = [v]
        return tuple(Collection.parse(item) for item in v)

    @property
    def serves_all(self) -> bool:
        """Whether this source is a catch-all."""
        return not self.collections


class LoadingConfig(BaseModel):
    """Load execution configuration."""

    model_config = ConfigDict(frozen=True)

    max_workers: int = Field(
        default=4, ge=1, le=32, description="Parallel handler batches per call"
    )
    validate_schemas: bool = Field(
        default=True, description="Check collection schemas before writing"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(frozen=True)

    level: str = Field(default="INFO")
    json_output: bool = Field(default=False, description="Render log lines as JSON")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Ensure the level is a standard logging level."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            msg = f"Unknown log level: {v!r}"
            raise ValueError(msg)
        return level


class IngestConfig(BaseModel):
    """Complete ingestion configuration."""

    model_config = ConfigDict(frozen=True)

    project: str = Field(default="lapingest", description="Project identifier")
    storage: StorageConfig = Field(default_factory=StorageConfig)
    loading: LoadingConfig = Field(default_factory=LoadingConfig)
    sources: tuple[SourceConfig, ...] = Field(default=())
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def default(cls) -> "IngestConfig":
        """Configuration reading every collection from the bundled sample files."""
        return cls(sources=(SourceConfig(type="samplecsv"),))

    def source_for(self, collection: Collection) -> SourceConfig | None:
        """
        Find the source configured for a collection.

        Sources listing the collection explicitly win over catch-all
        sources; among equals the first one declared wins.

        Args:
            collection: Collection to look up.

        Returns:
            The matching source, or None if nothing serves the collection.
        """
        for source in self.sources:
            if collection in source.collections:
                return source
        for source in self.sources:
            if source.serves_all:
                return source
        return None
