from sqlalchemy import Column, String, DateTime, ForeignKey, ForeignKeyConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base


class Friendship(Base):
    """
    Directed friend edge: ``friend_id`` is in ``user_id``'s friends set.

    An accepted request produces one edge in each direction; both are
    written in the same transaction.
    """
    __tablename__ = "friendships"

    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    friend_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True)
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", foreign_keys=[user_id], back_populates="friendships")
    friend = relationship("User", foreign_keys=[friend_id])

    def __repr__(self):
        return f"<Friendship user={self.user_id} friend={self.friend_id}>"


class Favorite(Base):
    """
    Per-user favorite tag on an existing friend edge.

    The composite foreign key onto ``friendships`` keeps favorites a subset
    of friends at the schema level.
    """
    __tablename__ = "favorites"

    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    friend_id = Column(String, primary_key=True)
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", foreign_keys=[user_id], back_populates="favorites")

    __table_args__ = (
        ForeignKeyConstraint(
            ["user_id", "friend_id"],
            ["friendships.user_id", "friendships.friend_id"],
            ondelete="CASCADE",
            name="fk_favorites_friendship",
        ),
    )

    def __repr__(self):
        return f"<Favorite user={self.user_id} friend={self.friend_id}>"
