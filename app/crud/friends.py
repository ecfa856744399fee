from contextlib import contextmanager
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import func
from typing import Iterator, List, Optional, Set
from app.models.friend_request import FriendRequest, FriendRequestStatus, ordered_pair
from app.models.friendship import Friendship, Favorite
from app.models.user import User
from app.utils.logger import get_logger

logger = get_logger(__name__)

class FriendsCRUD:
    """
    Store access for the friend graph: find, insert and field-level updates
    over users, friend requests, friend edges and favorites.

    Writes are only flushed; callers decide the transaction boundary with
    ``transaction()``.
    """

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Commit everything written inside the block, or roll all of it back."""
        try:
            yield
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    # Users

    def get_user(self, user_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def find_recommended_users(self, exclude_ids: List[str]) -> List[User]:
        """Onboarded users not in ``exclude_ids``, in creation order."""
        return self.db.query(User).filter(
            User.id.notin_(exclude_ids),
            User.is_onboarded.is_(True)
        ).order_by(User.created_at, User.id).all()

    # Friend requests

    def get_friend_request(self, request_id: str) -> Optional[FriendRequest]:
        return self.db.query(FriendRequest).filter(FriendRequest.id == request_id).first()

    def create_friend_request(self, sender_id: str, recipient_id: str) -> FriendRequest:
        """Insert a pending request; a second request for the pair fails on the ordered user pair."""
        user_low_id, user_high_id = ordered_pair(sender_id, recipient_id)
        friend_request = FriendRequest(
            sender_id=sender_id,
            recipient_id=recipient_id,
            user_low_id=user_low_id,
            user_high_id=user_high_id,
            status=FriendRequestStatus.PENDING.value
        )
        self.db.add(friend_request)
        self.db.flush()
        return friend_request

    def find_friend_requests(
        self,
        sender_id: Optional[str] = None,
        recipient_id: Optional[str] = None,
        status: Optional[FriendRequestStatus] = None
    ) -> List[FriendRequest]:
        query = self.db.query(FriendRequest).options(
            joinedload(FriendRequest.sender),
            joinedload(FriendRequest.recipient)
        )
        if sender_id is not None:
            query = query.filter(FriendRequest.sender_id == sender_id)
        if recipient_id is not None:
            query = query.filter(FriendRequest.recipient_id == recipient_id)
        if status is not None:
            query = query.filter(FriendRequest.status == status.value)
        return query.order_by(FriendRequest.created_at.desc(), FriendRequest.id).all()

    def mark_request_accepted(self, request_id: str) -> bool:
        """
        Move a request from pending to accepted.

        The status check is part of the UPDATE itself, so of two racing
        accepts only one sees a matched row.
        """
        updated = self.db.query(FriendRequest).filter(
            FriendRequest.id == request_id,
            FriendRequest.status == FriendRequestStatus.PENDING.value
        ).update(
            {
                FriendRequest.status: FriendRequestStatus.ACCEPTED.value,
                FriendRequest.updated_at: func.now(),
            },
            synchronize_session=False
        )
        return updated == 1

    # Friend edges

    def get_friend_ids(self, user_id: str) -> List[str]:
        rows = self.db.query(Friendship.friend_id).filter(
            Friendship.user_id == user_id
        ).order_by(Friendship.created_at, Friendship.friend_id).all()
        return [row.friend_id for row in rows]

    def get_friends(self, user_id: str) -> List[User]:
        return self.db.query(User).join(
            Friendship, Friendship.friend_id == User.id
        ).filter(
            Friendship.user_id == user_id
        ).order_by(Friendship.created_at, Friendship.friend_id).all()

    def are_friends(self, user_id: str, other_id: str) -> bool:
        """True if ``other_id`` is in ``user_id``'s friends set."""
        return self.db.get(Friendship, (user_id, other_id)) is not None

    def add_friend_edge(self, user_id: str, friend_id: str) -> bool:
        """Add ``friend_id`` to ``user_id``'s friends. Returns False if it was already there."""
        if self.are_friends(user_id, friend_id):
            return False
        self.db.add(Friendship(user_id=user_id, friend_id=friend_id))
        self.db.flush()
        return True

    # Favorites

    def get_favorite_ids(self, user_id: str) -> Set[str]:
        rows = self.db.query(Favorite.friend_id).filter(Favorite.user_id == user_id).all()
        return {row.friend_id for row in rows}

    def add_favorite_edge(self, user_id: str, friend_id: str) -> bool:
        if self.db.get(Favorite, (user_id, friend_id)) is not None:
            return False
        self.db.add(Favorite(user_id=user_id, friend_id=friend_id))
        self.db.flush()
        return True

    def remove_favorite_edge(self, user_id: str, friend_id: str) -> bool:
        deleted = self.db.query(Favorite).filter(
            Favorite.user_id == user_id,
            Favorite.friend_id == friend_id
        ).delete(synchronize_session=False)
        return deleted > 0

    def refresh(self, instance) -> None:
        self.db.refresh(instance)
