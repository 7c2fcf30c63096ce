"""
Schema definitions using Pandera for the input collections.
"""

from lapingest.schemas.collections import (
    ActivitySchema,
    CourseSchema,
    EnrollmentSchema,
    GradeSchema,
    PersonalSchema,
)
from lapingest.schemas.registry import SchemaInfo, SchemaRegistry

__all__ = [
    "ActivitySchema",
    "CourseSchema",
    "EnrollmentSchema",
    "GradeSchema",
    "PersonalSchema",
    "SchemaInfo",
    "SchemaRegistry",
]
