"""
Tests for FriendsService against a real SQLite store
"""

import threading

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from app.crud.friends import FriendsCRUD
from app.models import Favorite, FriendRequest, FriendRequestStatus, Friendship
from app.services.errors import (
    ConflictError, ForbiddenError, NotFoundError, UnavailableError, ValidationError
)
from app.services.friends_service import FriendsService


class TestSendFriendRequest:
    """Creating requests and the one-request-per-pair rule"""

    def test_creates_pending_request(self, service, make_user):
        alice, bob = make_user("alice"), make_user("bob")

        friend_request = service.send_friend_request(alice.id, bob.id)

        assert friend_request.status == FriendRequestStatus.PENDING.value
        assert friend_request.sender_id == alice.id
        assert friend_request.recipient_id == bob.id
        assert friend_request.created_at is not None

    def test_self_request_is_rejected_as_validation(self, service, make_user, db):
        alice = make_user("alice")

        with pytest.raises(ValidationError):
            service.send_friend_request(alice.id, alice.id)
        assert db.query(FriendRequest).count() == 0

    def test_unknown_recipient_is_not_found(self, service, make_user):
        alice = make_user("alice")

        with pytest.raises(NotFoundError):
            service.send_friend_request(alice.id, "ghost")

    def test_same_direction_duplicate_is_conflict(self, service, make_user):
        alice, bob = make_user("alice"), make_user("bob")
        service.send_friend_request(alice.id, bob.id)

        with pytest.raises(ConflictError):
            service.send_friend_request(alice.id, bob.id)

    def test_reverse_direction_duplicate_is_conflict(self, service, make_user, db):
        alice, bob = make_user("alice"), make_user("bob")
        service.send_friend_request(alice.id, bob.id)

        with pytest.raises(ConflictError):
            service.send_friend_request(bob.id, alice.id)
        assert db.query(FriendRequest).count() == 1

    def test_pairs_sharing_a_joined_form_do_not_collide(self, service, make_user, db):
        a, b_c = make_user("a"), make_user("b|c")
        a_b, c = make_user("a|b"), make_user("c")
        service.send_friend_request(a.id, b_c.id)

        friend_request = service.send_friend_request(a_b.id, c.id)

        assert friend_request.status == FriendRequestStatus.PENDING.value
        assert (friend_request.user_low_id, friend_request.user_high_id) == ("a|b", "c")
        assert db.query(FriendRequest).count() == 2

    def test_already_friends_is_conflict(self, service, make_user):
        alice, bob = make_user("alice"), make_user("bob")
        friend_request = service.send_friend_request(alice.id, bob.id)
        service.accept_friend_request(friend_request.id, bob.id)

        with pytest.raises(ConflictError, match="already friends"):
            service.send_friend_request(bob.id, alice.id)

    def test_accepted_request_still_blocks_new_request(self, service, store, make_user, db):
        alice, bob = make_user("alice"), make_user("bob")
        friend_request = service.send_friend_request(alice.id, bob.id)
        service.accept_friend_request(friend_request.id, bob.id)
        # Drop the edges so only the accepted request record remains
        db.query(Friendship).delete()
        db.commit()

        with pytest.raises(ConflictError, match="already exists"):
            service.send_friend_request(alice.id, bob.id)

    def test_concurrent_opposite_requests_only_one_succeeds(self, session_factory, make_user):
        alice, bob = make_user("alice"), make_user("bob")
        barrier = threading.Barrier(2)
        outcomes = []
        lock = threading.Lock()

        def send(sender_id, recipient_id):
            session = session_factory()
            try:
                service = FriendsService(FriendsCRUD(session))
                barrier.wait(timeout=5)
                try:
                    service.send_friend_request(sender_id, recipient_id)
                    result = "created"
                except ConflictError:
                    result = "conflict"
                with lock:
                    outcomes.append(result)
            finally:
                session.close()

        threads = [
            threading.Thread(target=send, args=(alice.id, bob.id)),
            threading.Thread(target=send, args=(bob.id, alice.id)),
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=30)

        assert sorted(outcomes) == ["conflict", "created"]
        check = session_factory()
        try:
            assert check.query(FriendRequest).count() == 1
        finally:
            check.close()


class TestAcceptFriendRequest:
    """Accepting requests and the symmetric friendship it produces"""

    def test_accept_makes_friendship_symmetric(self, service, store, make_user):
        alice, bob = make_user("alice"), make_user("bob")
        friend_request = service.send_friend_request(alice.id, bob.id)

        accepted = service.accept_friend_request(friend_request.id, bob.id)

        assert accepted.status == FriendRequestStatus.ACCEPTED.value
        assert store.get_friend_ids(alice.id) == [bob.id]
        assert store.get_friend_ids(bob.id) == [alice.id]

    def test_unknown_request_is_not_found(self, service, make_user):
        bob = make_user("bob")

        with pytest.raises(NotFoundError):
            service.accept_friend_request("missing-request", bob.id)

    def test_non_recipient_is_forbidden_and_nothing_changes(self, service, store, make_user):
        alice, bob, carol = make_user("alice"), make_user("bob"), make_user("carol")
        friend_request = service.send_friend_request(alice.id, bob.id)

        for intruder in (alice.id, carol.id):
            with pytest.raises(ForbiddenError):
                service.accept_friend_request(friend_request.id, intruder)

        assert store.get_friend_request(friend_request.id).status == FriendRequestStatus.PENDING.value
        assert store.get_friend_ids(alice.id) == []
        assert store.get_friend_ids(bob.id) == []

    def test_second_accept_is_conflict(self, service, store, make_user):
        alice, bob = make_user("alice"), make_user("bob")
        friend_request = service.send_friend_request(alice.id, bob.id)
        service.accept_friend_request(friend_request.id, bob.id)

        with pytest.raises(ConflictError):
            service.accept_friend_request(friend_request.id, bob.id)
        assert store.get_friend_ids(bob.id) == [alice.id]

    def test_lost_race_on_status_update_writes_nothing(self, service, store, make_user, monkeypatch):
        alice, bob = make_user("alice"), make_user("bob")
        friend_request = service.send_friend_request(alice.id, bob.id)
        # Another worker accepted between our read and our update
        monkeypatch.setattr(store, "mark_request_accepted", lambda request_id: False)

        with pytest.raises(ConflictError):
            service.accept_friend_request(friend_request.id, bob.id)
        assert store.get_friend_ids(alice.id) == []
        assert store.get_friend_ids(bob.id) == []


class TestRequestListings:
    """Incoming, outgoing and accepted request views"""

    def test_listings_filter_by_direction_and_status(self, service, make_user):
        alice, bob, carol, dave = (make_user(n) for n in ("alice", "bob", "carol", "dave"))
        to_bob = service.send_friend_request(alice.id, bob.id)
        to_carol = service.send_friend_request(alice.id, carol.id)
        from_dave = service.send_friend_request(dave.id, alice.id)
        service.accept_friend_request(to_bob.id, bob.id)

        incoming = service.list_incoming_requests(alice.id)
        accepted = service.list_outgoing_accepted_requests(alice.id)
        outgoing = service.list_outgoing_pending_requests(alice.id)

        assert [r.id for r in incoming] == [from_dave.id]
        assert incoming[0].sender.full_name == "Dave"
        assert [r.id for r in accepted] == [to_bob.id]
        assert accepted[0].recipient.id == bob.id
        assert [r.id for r in outgoing] == [to_carol.id]

    def test_get_friend_requests_combines_incoming_and_accepted(self, service, make_user):
        alice, bob, carol = make_user("alice"), make_user("bob"), make_user("carol")
        to_bob = service.send_friend_request(alice.id, bob.id)
        from_carol = service.send_friend_request(carol.id, alice.id)
        service.accept_friend_request(to_bob.id, bob.id)

        incoming, accepted = service.get_friend_requests(alice.id)

        assert [r.id for r in incoming] == [from_carol.id]
        assert [r.id for r in accepted] == [to_bob.id]


def _befriend(service, sender, recipient):
    friend_request = service.send_friend_request(sender.id, recipient.id)
    service.accept_friend_request(friend_request.id, recipient.id)


class TestFavorites:
    """Favorites stay a subset of friends"""

    def test_full_scenario(self, service, store, make_user):
        alice, bob = make_user("alice"), make_user("bob")
        friend_request = service.send_friend_request(alice.id, bob.id)
        assert friend_request.status == "pending"

        accepted = service.accept_friend_request(friend_request.id, bob.id)
        assert accepted.status == "accepted"
        assert store.get_friend_ids(alice.id) == [bob.id]
        assert store.get_friend_ids(bob.id) == [alice.id]

        service.add_favorite(alice.id, bob.id)
        assert store.get_favorite_ids(alice.id) == {bob.id}
        assert store.get_favorite_ids(bob.id) == set()

        service.remove_favorite(alice.id, bob.id)
        assert store.get_favorite_ids(alice.id) == set()

    def test_add_favorite_requires_friendship(self, service, store, make_user):
        alice, bob = make_user("alice"), make_user("bob")
        service.send_friend_request(alice.id, bob.id)

        with pytest.raises(ConflictError):
            service.add_favorite(alice.id, bob.id)
        assert store.get_favorite_ids(alice.id) == set()

    def test_add_favorite_unknown_user_is_not_found(self, service):
        with pytest.raises(NotFoundError):
            service.add_favorite("ghost", "anyone")

    def test_add_favorite_is_idempotent(self, service, store, make_user):
        alice, bob = make_user("alice"), make_user("bob")
        _befriend(service, alice, bob)

        service.add_favorite(alice.id, bob.id)
        service.add_favorite(alice.id, bob.id)

        assert store.get_favorite_ids(alice.id) == {bob.id}

    def test_remove_favorite_is_idempotent_and_never_fails(self, service, store, make_user):
        alice, bob = make_user("alice"), make_user("bob")
        _befriend(service, alice, bob)
        service.add_favorite(alice.id, bob.id)

        service.remove_favorite(alice.id, bob.id)
        once = store.get_favorite_ids(alice.id)
        service.remove_favorite(alice.id, bob.id)
        service.remove_favorite(alice.id, "never-a-friend")

        assert store.get_favorite_ids(alice.id) == once == set()

    def test_schema_rejects_favorite_without_friend_edge(self, db, make_user):
        alice, bob = make_user("alice"), make_user("bob")

        db.add(Favorite(user_id=alice.id, friend_id=bob.id))
        with pytest.raises(IntegrityError):
            db.commit()
        db.rollback()


class TestListFriends:

    def test_entries_match_friends_and_favorite_flags(self, service, make_user):
        alice, bob, carol, dave = (make_user(n) for n in ("alice", "bob", "carol", "dave"))
        _befriend(service, alice, bob)
        _befriend(service, carol, alice)
        service.send_friend_request(alice.id, dave.id)
        service.add_favorite(alice.id, carol.id)

        friends = service.list_friends(alice.id)

        assert len(friends) == 2
        assert {friend.id: is_favorite for friend, is_favorite in friends} == {
            bob.id: False,
            carol.id: True,
        }

    def test_no_friends(self, service, make_user):
        alice = make_user("alice")
        assert service.list_friends(alice.id) == []


class TestRecommendedUsers:

    def test_excludes_self_friends_and_unonboarded(self, service, make_user):
        alice, bob, carol = make_user("alice"), make_user("bob"), make_user("carol")
        make_user("eve", is_onboarded=False)
        dave = make_user("dave")
        _befriend(service, alice, bob)
        # A pending request does not hide the recipient
        service.send_friend_request(alice.id, carol.id)

        recommended = {user.id for user in service.list_recommended_users(alice.id)}

        assert recommended == {carol.id, dave.id}

    def test_user_without_friends_sees_every_other_onboarded_user(self, service, make_user):
        alice = make_user("alice", is_onboarded=False)
        bob, carol = make_user("bob"), make_user("carol")

        recommended = {user.id for user in service.list_recommended_users(alice.id)}

        assert recommended == {bob.id, carol.id}


class TestRepairFriendships:
    """Reconciling friend edges with accepted requests"""

    def test_restores_missing_edge_and_is_rerunnable(self, service, store, make_user, db):
        alice, bob = make_user("alice"), make_user("bob")
        friend_request = service.send_friend_request(alice.id, bob.id)
        # Simulate a crash after the status change and the first edge
        with store.transaction():
            store.mark_request_accepted(friend_request.id)
            store.add_friend_edge(alice.id, bob.id)
        assert store.get_friend_ids(bob.id) == []

        assert service.repair_friendships() == 1
        assert store.get_friend_ids(alice.id) == [bob.id]
        assert store.get_friend_ids(bob.id) == [alice.id]
        assert service.repair_friendships() == 0

    def test_ignores_pending_requests(self, service, store, make_user):
        alice, bob = make_user("alice"), make_user("bob")
        service.send_friend_request(alice.id, bob.id)

        assert service.repair_friendships() == 0
        assert store.get_friend_ids(alice.id) == []


class TestStoreFailures:

    def test_store_error_surfaces_as_unavailable(self, service, store, monkeypatch):
        def broken(*args, **kwargs):
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))

        monkeypatch.setattr(store, "get_user", broken)

        with pytest.raises(UnavailableError):
            service.send_friend_request("alice", "bob")
        with pytest.raises(UnavailableError):
            service.add_favorite("alice", "bob")

    def test_read_failure_surfaces_as_unavailable(self, service, store, monkeypatch):
        def broken(*args, **kwargs):
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))

        monkeypatch.setattr(store, "find_friend_requests", broken)

        with pytest.raises(UnavailableError):
            service.list_incoming_requests("alice")
