from app.database import Base
from app.models.user import User
from app.models.friend_request import FriendRequest, FriendRequestStatus, ordered_pair
from app.models.friendship import Friendship, Favorite

__all__ = [
    "Base", "User",
    "FriendRequest", "FriendRequestStatus", "ordered_pair",
    "Friendship", "Favorite",
]
