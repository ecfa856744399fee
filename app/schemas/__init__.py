from app.schemas.user import UserSummary, UserResponse, OnboardingRequest, CurrentUser
from app.schemas.friends import (
    FriendRequestResponse, FriendResponse, FriendRequestsOverview,
    FriendRequestStatusResponse, FavoriteStatusResponse
)

__all__ = [
    "UserSummary", "UserResponse", "OnboardingRequest", "CurrentUser",
    "FriendRequestResponse", "FriendResponse", "FriendRequestsOverview",
    "FriendRequestStatusResponse", "FavoriteStatusResponse",
]
