"""
Pandera schemas for the input collections.

Only the identifier columns each collection is keyed by are checked.
Every other column passes through untouched (strict = False), the
content of a collection is the business of the pipeline stages that
consume it.

Column naming follows the upper-case CSV headers of the input files:
    ALTERNATIVE_ID  - Pseudonymous student identifier
    COURSE_ID       - Course offering identifier
"""

import pandera.pandas as pa
from pandera.typing import Series


class PersonalSchema(pa.DataFrameModel):
    """Schema for student demographic records."""

    ALTERNATIVE_ID: Series[str] = pa.Field(
        description="Pseudonymous student identifier",
        str_length={"min_value": 1},
    )

    class Config:
        """Schema configuration."""

        name = "PersonalSchema"
        strict = False  # Allow extra columns
        coerce = True


class CourseSchema(pa.DataFrameModel):
    """Schema for course offering records."""

    COURSE_ID: Series[str] = pa.Field(
        description="Course offering identifier",
        str_length={"min_value": 1},
    )

    class Config:
        """Schema configuration."""

        name = "CourseSchema"
        strict = False
        coerce = True


class EnrollmentSchema(pa.DataFrameModel):
    """Schema for student-to-course enrollment records."""

    ALTERNATIVE_ID: Series[str] = pa.Field(
        description="Pseudonymous student identifier",
        str_length={"min_value": 1},
    )
    COURSE_ID: Series[str] = pa.Field(
        description="Course offering identifier",
        str_length={"min_value": 1},
    )

    class Config:
        """Schema configuration."""

        name = "EnrollmentSchema"
        strict = False
        coerce = True


class GradeSchema(pa.DataFrameModel):
    """Schema for gradebook entries."""

    ALTERNATIVE_ID: Series[str] = pa.Field(
        description="Pseudonymous student identifier",
        str_length={"min_value": 1},
    )
    COURSE_ID: Series[str] = pa.Field(
        description="Course offering identifier",
        str_length={"min_value": 1},
    )

    class Config:
        """Schema configuration."""

        name = "GradeSchema"
        strict = False
        coerce = True


class ActivitySchema(pa.DataFrameModel):
    """Schema for LMS activity events."""

    ALTERNATIVE_ID: Series[str] = pa.Field(
        description="Pseudonymous student identifier",
        str_length={"min_value": 1},
    )
    COURSE_ID: Series[str] = pa.Field(
        description="Course offering identifier",
        str_length={"min_value": 1},
    )

    class Config:
        """Schema configuration."""

        name = "ActivitySchema"
        strict = False
        coerce = True
