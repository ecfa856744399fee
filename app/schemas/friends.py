from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

from app.schemas.user import UserSummary

class FriendRequestResponse(BaseModel):
    id: str
    sender_id: str
    recipient_id: str
    status: str
    created_at: Optional[datetime] = None
    sender: Optional[UserSummary] = None
    recipient: Optional[UserSummary] = None

    class Config:
        from_attributes = True

class FriendResponse(UserSummary):
    is_favorite: bool = False

class FriendRequestsOverview(BaseModel):
    """Incoming pending requests plus the caller's requests that were accepted"""
    incoming_requests: List[FriendRequestResponse]
    accepted_requests: List[FriendRequestResponse]

class FriendRequestStatusResponse(BaseModel):
    message: str
    status: str

class FavoriteStatusResponse(BaseModel):
    success: bool
    message: str
