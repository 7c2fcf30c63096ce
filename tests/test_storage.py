"""Tests for the temporary stores."""

from pathlib import Path

import pandas as pd
import pytest

from lapingest.config.settings import StorageBackend, StorageConfig
from lapingest.ingestion.types import Collection
from lapingest.storage import InMemoryTempStore, ParquetTempStore, TempStore, create_store


@pytest.fixture
def grades() -> pd.DataFrame:
    """Small gradebook frame with zero-padded identifiers."""
    return pd.DataFrame(
        {
            "ALTERNATIVE_ID": ["000101", "000102"],
            "COURSE_ID": ["BIO-100-01", "BIO-100-01"],
            "EARNED_POINTS": [8.0, 9.5],
        }
    )


@pytest.fixture(params=["memory", "parquet"])
def temp_store(request: pytest.FixtureRequest, tmp_path: Path) -> TempStore:
    """Each store implementation."""
    if request.param == "parquet":
        return ParquetTempStore(tmp_path / "store")
    return InMemoryTempStore()


class TestTempStore:
    """Behaviour shared by every store."""

    def test_write_and_read(self, temp_store: TempStore, grades: pd.DataFrame) -> None:
        """Test that written records are read back unchanged."""
        assert temp_store.write(Collection.GRADE, grades) == 2

        stored = temp_store.read(Collection.GRADE)
        assert stored is not None
        pd.testing.assert_frame_equal(stored, grades)
        assert temp_store.collections() == {Collection.GRADE}

    def test_read_missing(self, temp_store: TempStore) -> None:
        """Test that an absent collection reads as None."""
        assert temp_store.read(Collection.COURSE) is None

    def test_write_replaces(self, temp_store: TempStore, grades: pd.DataFrame) -> None:
        """Test that a second write replaces the first."""
        temp_store.write(Collection.GRADE, grades)
        temp_store.write(Collection.GRADE, grades.head(1))

        stored = temp_store.read(Collection.GRADE)
        assert stored is not None
        assert len(stored) == 1

    def test_reset(self, temp_store: TempStore, grades: pd.DataFrame) -> None:
        """Test that reset wipes every collection."""
        temp_store.write(Collection.GRADE, grades)
        temp_store.write(Collection.ENROLLMENT, grades[["ALTERNATIVE_ID", "COURSE_ID"]])

        temp_store.reset_temp_store()

        assert temp_store.collections() == set()
        assert temp_store.read(Collection.GRADE) is None

    def test_reset_empty_store(self, temp_store: TempStore) -> None:
        """Test that resetting an empty store is harmless."""
        temp_store.reset_temp_store()
        assert temp_store.collections() == set()


class TestInMemoryTempStore:
    """Tests specific to InMemoryTempStore."""

    def test_stores_copies(self, grades: pd.DataFrame) -> None:
        """Test that callers cannot mutate stored records."""
        store = InMemoryTempStore()
        store.write(Collection.GRADE, grades)
        grades.loc[0, "EARNED_POINTS"] = 0.0

        stored = store.read(Collection.GRADE)
        assert stored is not None
        assert stored.loc[0, "EARNED_POINTS"] == 8.0


class TestParquetTempStore:
    """Tests specific to ParquetTempStore."""

    def test_creates_directory(self, tmp_path: Path) -> None:
        """Test that the store directory is created."""
        ParquetTempStore(tmp_path / "a" / "b")
        assert (tmp_path / "a" / "b").is_dir()

    def test_one_file_per_collection(self, tmp_path: Path, grades: pd.DataFrame) -> None:
        """Test the on-disk layout."""
        store = ParquetTempStore(tmp_path)
        store.write(Collection.GRADE, grades)

        assert store.path_for(Collection.GRADE) == tmp_path / "grade.parquet"
        assert sorted(p.name for p in tmp_path.iterdir()) == ["grade.parquet"]

    def test_reset_keeps_other_files(self, tmp_path: Path, grades: pd.DataFrame) -> None:
        """Test that reset only removes collection files."""
        (tmp_path / "notes.txt").write_text("keep", encoding="utf-8")
        store = ParquetTempStore(tmp_path)
        store.write(Collection.GRADE, grades)

        store.reset_temp_store()

        assert sorted(p.name for p in tmp_path.iterdir()) == ["notes.txt"]

    def test_failed_write_leaves_no_partial_file(
        self, tmp_path: Path, grades: pd.DataFrame, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that an interrupted write removes its temporary file."""
        store = ParquetTempStore(tmp_path)

        def truncated_write(frame: pd.DataFrame, path: Path, **kwargs: object) -> None:
            Path(path).write_bytes(b"PAR1")
            raise OSError("disk full")

        monkeypatch.setattr(pd.DataFrame, "to_parquet", truncated_write)

        with pytest.raises(OSError, match="disk full"):
            store.write(Collection.GRADE, grades)

        assert list(tmp_path.iterdir()) == []
        assert store.read(Collection.GRADE) is None

    def test_reset_removes_stale_temporary_files(self, tmp_path: Path) -> None:
        """Test that reset sweeps temporary files left by earlier processes."""
        (tmp_path / "grade.parquet.tmp").write_bytes(b"PAR1")
        store = ParquetTempStore(tmp_path)

        store.reset_temp_store()

        assert list(tmp_path.iterdir()) == []


class TestCreateStore:
    """Tests for create_store."""

    def test_memory(self) -> None:
        """Test the default backend."""
        assert isinstance(create_store(StorageConfig()), InMemoryTempStore)

    def test_parquet(self, tmp_path: Path) -> None:
        """Test the parquet backend."""
        store = create_store(StorageConfig(backend=StorageBackend.PARQUET, path=tmp_path))
        assert isinstance(store, ParquetTempStore)
        assert store.directory == tmp_path

    def test_parquet_without_path(self) -> None:
        """Test that an unvalidated parquet config without a path is rejected."""
        config = StorageConfig.model_construct(backend=StorageBackend.PARQUET, path=None)
        with pytest.raises(ValueError, match="storage.path"):
            create_store(config)
