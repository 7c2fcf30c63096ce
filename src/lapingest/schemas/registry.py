"""
Schema registry keyed by collection.

Provides centralized access to the schema every collection is checked
against before it is written to the temporary store.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

import pandera.pandas as pa

from lapingest.ingestion.types import Collection
from lapingest.schemas.collections import (
    ActivitySchema,
    CourseSchema,
    EnrollmentSchema,
    GradeSchema,
    PersonalSchema,
)

if TYPE_CHECKING:
    import pandas as pd


@dataclass(frozen=True)
class SchemaInfo:
    """Metadata about a registered schema."""

    collection: Collection
    schema: type[pa.DataFrameModel]
    file_name: str
    description: str


class SchemaRegistry:
    """
    Centralized registry for all collection schemas.

    Also records the file name a collection is read from by CSV sources.
    """

    _version = "1.0.0"

    _schemas: ClassVar[dict[Collection, SchemaInfo]] = {
        Collection.PERSONAL: SchemaInfo(
            collection=Collection.PERSONAL,
            schema=PersonalSchema,
            file_name="personal.csv",
            description="Student demographics",
        ),
        Collection.COURSE: SchemaInfo(
            collection=Collection.COURSE,
            schema=CourseSchema,
            file_name="course.csv",
            description="Course offerings",
        ),
        Collection.ENROLLMENT: SchemaInfo(
            collection=Collection.ENROLLMENT,
            schema=EnrollmentSchema,
            file_name="enrollment.csv",
            description="Student enrollments per course",
        ),
        Collection.GRADE: SchemaInfo(
            collection=Collection.GRADE,
            schema=GradeSchema,
            file_name="grade.csv",
            description="Gradebook entries",
        ),
        Collection.ACTIVITY: SchemaInfo(
            collection=Collection.ACTIVITY,
            schema=ActivitySchema,
            file_name="activity.csv",
            description="LMS activity events",
        ),
    }

    @classmethod
    def registry_version(cls) -> str:
        """Get the registry version."""
        return cls._version

    @classmethod
    def get(cls, collection: Collection) -> type[pa.DataFrameModel]:
        """
        Get the schema for a collection.

        Args:
            collection: Collection to look up.

        Returns:
            The Pandera DataFrameModel class.
        """
        return cls.get_info(collection).schema

    @classmethod
    def get_info(cls, collection: Collection) -> SchemaInfo:
        """
        Get full schema info for a collection.

        Raises:
            KeyError: If no schema is registered for the collection.
        """
        if collection not in cls._schemas:
            available = ", ".join(c.name for c in cls._schemas)
            msg = f"No schema for collection '{collection}'. Available: {available}"
            raise KeyError(msg)
        return cls._schemas[collection]

    @classmethod
    def list_collections(cls) -> list[Collection]:
        """List collections with a registered schema, in canonical order."""
        return [c for c in Collection if c in cls._schemas]

    @classmethod
    def validate(cls, df: "pd.DataFrame", collection: Collection) -> "pd.DataFrame":
        """
        Validate a DataFrame against the schema of a collection.

        Args:
            df: DataFrame to validate.
            collection: Collection the DataFrame holds.

        Returns:
            Validated DataFrame.

        Raises:
            pandera.errors.SchemaError: If validation fails.
        """
        return cls.get(collection).validate(df)
