"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from lapingest.config.settings import IngestConfig, SourceConfig
from lapingest.ingestion.orchestrator import LoadOrchestrator
from lapingest.ingestion.registry import HandlerRegistry
from lapingest.ingestion.types import SourceType
from lapingest.storage.memory import InMemoryTempStore

from tests.support import StubSource


@pytest.fixture
def stub() -> StubSource:
    """A stub source registered as the CSV source type."""
    return StubSource()


@pytest.fixture
def store() -> InMemoryTempStore:
    """An empty in-memory temporary store."""
    return InMemoryTempStore()


@pytest.fixture
def stub_config() -> IngestConfig:
    """Configuration with a single catch-all CSV source."""
    return IngestConfig(
        project="test",
        sources=(SourceConfig(type="csv", settings={"directory": "unused"}),),
    )


@pytest.fixture
def orchestrator(
    stub: StubSource, stub_config: IngestConfig, store: InMemoryTempStore
) -> LoadOrchestrator:
    """Orchestrator whose CSV source is served by the stub."""
    registry = HandlerRegistry({SourceType.CSV: stub.factory})
    return LoadOrchestrator(stub_config, store, registry=registry)


@pytest.fixture
def csv_dir(tmp_path: Path) -> Path:
    """Directory holding one small CSV file per collection."""
    directory = tmp_path / "inputs"
    directory.mkdir()
    (directory / "personal.csv").write_text(
        "ALTERNATIVE_ID,AGE,GENDER\n000101,19,F\n000102,22,M\n", encoding="utf-8"
    )
    (directory / "course.csv").write_text(
        "COURSE_ID,SUBJECT\nBIO-100-01,BIO\n", encoding="utf-8"
    )
    (directory / "enrollment.csv").write_text(
        "ALTERNATIVE_ID,COURSE_ID\n000101,BIO-100-01\n000102,BIO-100-01\n",
        encoding="utf-8",
    )
    (directory / "grade.csv").write_text(
        "ALTERNATIVE_ID,COURSE_ID,EARNED_POINTS\n000101,BIO-100-01,8\n",
        encoding="utf-8",
    )
    (directory / "activity.csv").write_text(
        "alternative_id, course_id ,event\n000102,BIO-100-01,content.read\n",
        encoding="utf-8",
    )
    return directory
