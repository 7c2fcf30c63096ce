"""
CSV input handlers.

SAMPLE_CSV reads the sample files bundled with the package, CSV reads
`<collection>.csv` files from a configured directory.
"""

from importlib import resources
from pathlib import Path
from typing import Any

import pandas as pd

from lapingest.config.settings import IngestConfig, SourceConfig
from lapingest.ingestion.base import InputHandler
from lapingest.ingestion.types import Collection, InputKind, SourceType
from lapingest.schemas.registry import SchemaRegistry
from lapingest.storage.base import TempStore
from lapingest.utils.logging import get_logger

log = get_logger(__name__)

# Identifier columns are read as strings so leading zeros survive
ID_COLUMNS = ("ALTERNATIVE_ID", "COURSE_ID")


def read_collection_csv(path: Path | Any) -> pd.DataFrame:
    """
    Read a collection CSV with normalized column names.

    Args:
        path: Path (or importlib resource) of the CSV file.

    Returns:
        DataFrame with upper-case, whitespace-stripped column names.
    """
    with path.open("r", encoding="utf-8") as f:
        header = pd.read_csv(f, nrows=0).columns
    id_dtypes = {c: str for c in header if str(c).strip().upper() in ID_COLUMNS}
    with path.open("r", encoding="utf-8") as f:
        df = pd.read_csv(f, dtype=id_dtypes)
    df.columns = [str(c).strip().upper() for c in df.columns]
    return df


class SampleCSVInputHandler(InputHandler):
    """Handler for the sample CSV files shipped in `lapingest/data/sample`."""

    source_type = SourceType.SAMPLE_CSV
    input_kind = InputKind.CSV

    def _read_collection(self, collection: Collection) -> pd.DataFrame:
        file_name = SchemaRegistry.get_info(collection).file_name
        resource = resources.files("lapingest").joinpath("data", "sample", file_name)
        if not resource.is_file():
            msg = f"Sample file not found for {collection.name}: {file_name}"
            raise FileNotFoundError(msg)

        log.debug("Loading sample CSV", collection=collection.name, file=file_name)
        return read_collection_csv(resource)


class CSVInputHandler(InputHandler):
    """
    Handler for CSV files in a directory.

    Settings:
        directory: Directory holding the files (required).
        files: Optional collection -> file name overrides, e.g.
            {"grade": "gradebook_2015.csv"}.
    """

    source_type = SourceType.CSV
    input_kind = InputKind.CSV

    def __init__(
        self,
        source_config: SourceConfig,
        config: IngestConfig,
        store: TempStore,
    ) -> None:
        """Initialize CSV handler, requiring a `directory` setting."""
        super().__init__(source_config, config, store)
        directory = self.settings.get("directory")
        if not directory:
            msg = "CSV source requires a 'directory' setting"
            raise ValueError(msg)
        self.directory = Path(directory)
        self.file_overrides: dict[str, str] = {
            str(k).lower(): str(v) for k, v in (self.settings.get("files") or {}).items()
        }

    def resolve_path(self, collection: Collection) -> Path:
        """
        Resolve the file a collection is read from.

        Args:
            collection: Collection to resolve.

        Returns:
            Path of the CSV file.
        """
        file_name = self.file_overrides.get(
            collection.value, SchemaRegistry.get_info(collection).file_name
        )
        return self.directory / file_name

    def _read_collection(self, collection: Collection) -> pd.DataFrame:
        path = self.resolve_path(collection)
        if not path.exists():
            msg = f"Input file not found for {collection.name}: {path}"
            raise FileNotFoundError(msg)

        log.info("Loading CSV", collection=collection.name, path=str(path))
        return read_collection_csv(path)
