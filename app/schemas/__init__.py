"""
app/schemas package marker.
"""

from app.schemas.upload import UploadMessageResponse, UploadSummaryResponse

__all__ = [
    "UploadMessageResponse",
    "UploadSummaryResponse",
]
