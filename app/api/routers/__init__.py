"""
app/api/routers package marker.
"""

from app.api.routers.upload import router as upload_router

__all__ = [
    "upload_router",
]
