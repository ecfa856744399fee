from sqlalchemy import Column, String, DateTime, Boolean, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base
import uuid

class User(Base):
    """User model for storing account and language-exchange profile data."""
    __tablename__ = "users"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))  # Firebase UID when available
    email = Column(String, unique=True, index=True, nullable=True)
    full_name = Column(String, nullable=False, default="")
    profile_pic = Column(String, nullable=False, default="")
    bio = Column(Text, nullable=False, default="")

    # Language exchange profile
    native_language = Column(String, nullable=False, default="")
    learning_language = Column(String, nullable=False, default="")
    location = Column(String, nullable=False, default="")

    # Only onboarded users show up in recommendations
    is_onboarded = Column(Boolean, nullable=False, default=False, index=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Friend relationships
    sent_friend_requests = relationship("FriendRequest", foreign_keys="FriendRequest.sender_id", back_populates="sender")
    received_friend_requests = relationship("FriendRequest", foreign_keys="FriendRequest.recipient_id", back_populates="recipient")
    friendships = relationship("Friendship", foreign_keys="Friendship.user_id", back_populates="user", cascade="all, delete-orphan")
    favorites = relationship("Favorite", foreign_keys="Favorite.user_id", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User id={self.id} email={self.email} full_name={self.full_name} onboarded={self.is_onboarded}>"
