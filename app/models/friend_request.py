from sqlalchemy import Column, String, DateTime, UniqueConstraint, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base
import enum
import uuid
from typing import Tuple

class FriendRequestStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"


def ordered_pair(user_a: str, user_b: str) -> Tuple[str, str]:
    """The unordered pair {user_a, user_b} as (lower id, higher id)."""
    low, high = sorted([user_a, user_b])
    return low, high


class FriendRequest(Base):
    """
    Friend request between two users.

    Requests are never deleted: an accepted request stays as the history
    record that feeds the sender's "request accepted" notifications.
    """
    __tablename__ = "friend_requests"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    sender_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    recipient_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # The two user ids in sorted order, so A->B and B->A collide on the same row
    user_low_id = Column(String, nullable=False)
    user_high_id = Column(String, nullable=False)
    status = Column(String, default=FriendRequestStatus.PENDING.value, nullable=False, index=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    sender = relationship("User", foreign_keys=[sender_id], back_populates="sent_friend_requests")
    recipient = relationship("User", foreign_keys=[recipient_id], back_populates="received_friend_requests")

    # One request per unordered pair, whatever its status
    __table_args__ = (
        UniqueConstraint('user_low_id', 'user_high_id', name='unique_friend_request_pair'),
    )

    def __repr__(self):
        return f"<FriendRequest id={self.id} sender={self.sender_id} recipient={self.recipient_id} status={self.status}>"
