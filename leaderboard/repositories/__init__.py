# Repository layer - Data access with Pydantic responses

from .base import BaseRepository
from .user_repository import UserRepository
from .claim_history_repository import ClaimHistoryRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "ClaimHistoryRepository",
]
