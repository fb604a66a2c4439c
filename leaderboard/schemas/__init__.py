from .user import User, AddUserRequest
from .claim import (
    ClaimPointsRequest,
    ClaimPointsResponse,
    ClaimResult,
    ClaimHistoryEntry,
)
from .health import HealthCheckResponse

__all__ = [
    "User",
    "AddUserRequest",
    "ClaimPointsRequest",
    "ClaimPointsResponse",
    "ClaimResult",
    "ClaimHistoryEntry",
    "HealthCheckResponse",
]
