"""
app/mappers package marker.
"""

from app.mappers.nested_field_assigner import NOT_A_NUMBER, assign, build_raw_record
from app.mappers.user_record_mapper import UserRecordMapper, transform

__all__ = [
    "NOT_A_NUMBER",
    "UserRecordMapper",
    "assign",
    "build_raw_record",
    "transform",
]
