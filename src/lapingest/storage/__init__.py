"""
Temporary working store that handlers write collections into.

A reset wipes the store wholesale; there is no per-collection removal.
"""

from lapingest.storage.base import TempStore, create_store
from lapingest.storage.memory import InMemoryTempStore
from lapingest.storage.parquet import ParquetTempStore

__all__ = ["InMemoryTempStore", "ParquetTempStore", "TempStore", "create_store"]
