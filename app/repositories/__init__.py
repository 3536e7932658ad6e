"""
app/repositories package marker.
"""

from app.repositories.user_repository import UserRepository

__all__ = [
    "UserRepository",
]
