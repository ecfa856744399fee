from __future__ import annotations
from contextlib import contextmanager
from typing import Iterator, List, Tuple
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.crud.friends import FriendsCRUD
from app.models.friend_request import FriendRequest, FriendRequestStatus
from app.models.user import User
from app.services.errors import (
    ConflictError, ForbiddenError, FriendsServiceError, NotFoundError, UnavailableError, ValidationError
)
from app.utils.logger import get_logger

logger = get_logger(__name__)


class FriendsService:
    """
    Friend requests, friend edges and favorites.

    Holds no state of its own between calls; everything lives in the store
    it is constructed with. Preconditions are checked against the store and
    violations raise a ``FriendsServiceError`` subclass. Nothing is retried.
    """

    def __init__(self, store: FriendsCRUD):
        self.store = store

    @contextmanager
    def _store_errors(self, action: str) -> Iterator[None]:
        try:
            yield
        except FriendsServiceError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Store failure while trying to {action}: {e}")
            self.store.db.rollback()
            raise UnavailableError("The service is temporarily unavailable, please try again") from e

    def _require_user(self, user_id: str, message: str = "User not found") -> User:
        user = self.store.get_user(user_id)
        if user is None:
            raise NotFoundError(message)
        return user

    def send_friend_request(self, sender_id: str, recipient_id: str) -> FriendRequest:
        """Create a pending request from ``sender_id`` to ``recipient_id``."""
        if not recipient_id:
            raise ValidationError("Recipient id is required")
        if sender_id == recipient_id:
            raise ValidationError("You cannot send friend request to yourself")

        with self._store_errors("send a friend request"):
            self._require_user(sender_id)
            self._require_user(recipient_id, "Recipient not found")

            if self.store.are_friends(recipient_id, sender_id):
                raise ConflictError("You are already friends with this user")

            # The unique pair key is the duplicate check; there is no prior read
            try:
                with self.store.transaction():
                    friend_request = self.store.create_friend_request(sender_id, recipient_id)
            except IntegrityError:
                logger.info(f"Duplicate friend request between {sender_id} and {recipient_id}")
                raise ConflictError("A friend request already exists between you and this user")

        logger.info(f"Friend request {friend_request.id} sent from {sender_id} to {recipient_id}")
        return friend_request

    def accept_friend_request(self, request_id: str, acting_user_id: str) -> FriendRequest:
        """
        Accept a pending request on behalf of its recipient.

        The status change and both friend-set insertions commit together. If
        the request has already left ``pending`` (including a concurrent
        accept that won the conditional update), nothing is written.
        """
        with self._store_errors("accept a friend request"):
            friend_request = self.store.get_friend_request(request_id)
            if friend_request is None:
                raise NotFoundError("Friend request not found")

            if friend_request.recipient_id != acting_user_id:
                raise ForbiddenError("You are not authorized to accept this friend request")

            if friend_request.status != FriendRequestStatus.PENDING.value:
                raise ConflictError("Friend request has already been accepted")

            with self.store.transaction():
                if not self.store.mark_request_accepted(request_id):
                    raise ConflictError("Friend request has already been accepted")
                self.store.add_friend_edge(friend_request.sender_id, friend_request.recipient_id)
                self.store.add_friend_edge(friend_request.recipient_id, friend_request.sender_id)

            self.store.refresh(friend_request)

        logger.info(f"Friend request {request_id} accepted by {acting_user_id}")
        return friend_request

    def list_incoming_requests(self, user_id: str) -> List[FriendRequest]:
        with self._store_errors("list incoming friend requests"):
            return self.store.find_friend_requests(
                recipient_id=user_id, status=FriendRequestStatus.PENDING
            )

    def list_outgoing_accepted_requests(self, user_id: str) -> List[FriendRequest]:
        """The caller's requests that were accepted; doubles as the notification feed."""
        with self._store_errors("list accepted friend requests"):
            return self.store.find_friend_requests(
                sender_id=user_id, status=FriendRequestStatus.ACCEPTED
            )

    def list_outgoing_pending_requests(self, user_id: str) -> List[FriendRequest]:
        with self._store_errors("list outgoing friend requests"):
            return self.store.find_friend_requests(
                sender_id=user_id, status=FriendRequestStatus.PENDING
            )

    def get_friend_requests(self, user_id: str) -> Tuple[List[FriendRequest], List[FriendRequest]]:
        """Incoming pending requests and outgoing accepted ones, in that order."""
        return self.list_incoming_requests(user_id), self.list_outgoing_accepted_requests(user_id)

    def list_friends(self, user_id: str) -> List[Tuple[User, bool]]:
        """Each friend of ``user_id`` paired with whether it is one of their favorites."""
        with self._store_errors("list friends"):
            friends = self.store.get_friends(user_id)
            favorite_ids = self.store.get_favorite_ids(user_id)
        return [(friend, friend.id in favorite_ids) for friend in friends]

    def add_favorite(self, user_id: str, target_id: str) -> None:
        with self._store_errors("add a favorite"):
            self._require_user(user_id)
            if not self.store.are_friends(user_id, target_id):
                raise ConflictError("You can only favorite your friends")
            with self.store.transaction():
                self.store.add_favorite_edge(user_id, target_id)

    def remove_favorite(self, user_id: str, target_id: str) -> None:
        """Drop ``target_id`` from the favorites; a no-op if it was never there."""
        with self._store_errors("remove a favorite"):
            with self.store.transaction():
                self.store.remove_favorite_edge(user_id, target_id)

    def list_recommended_users(self, user_id: str) -> List[User]:
        """Onboarded users other than ``user_id`` and its friends."""
        with self._store_errors("list recommended users"):
            friend_ids = self.store.get_friend_ids(user_id)
            return self.store.find_recommended_users([user_id, *friend_ids])

    def repair_friendships(self) -> int:
        """
        Re-insert any friend edge missing for an accepted request.

        Accepting writes both edges in one transaction, so this only finds
        work after edges were lost or written outside the service. Safe to
        run repeatedly. Returns the number of edges inserted.
        """
        repaired = 0
        with self._store_errors("repair friendships"):
            with self.store.transaction():
                for friend_request in self.store.find_friend_requests(status=FriendRequestStatus.ACCEPTED):
                    if self.store.add_friend_edge(friend_request.sender_id, friend_request.recipient_id):
                        repaired += 1
                    if self.store.add_friend_edge(friend_request.recipient_id, friend_request.sender_id):
                        repaired += 1
        if repaired:
            logger.warning(f"Repaired {repaired} missing friend edge(s)")
        else:
            logger.info("Friend edges consistent with accepted requests")
        return repaired
