from fastapi import Depends
from sqlalchemy.orm import Session

from app.crud.friends import FriendsCRUD
from app.database import get_db
from app.services.friends_service import FriendsService


def get_friends_crud(db: Session = Depends(get_db)) -> FriendsCRUD:
    """Store access bound to the request's database session."""
    return FriendsCRUD(db)


def get_friends_service(store: FriendsCRUD = Depends(get_friends_crud)) -> FriendsService:
    """
    FastAPI dependency that builds a ``FriendsService`` per request.

    Tests can swap either layer through ``app.dependency_overrides``.
    """
    return FriendsService(store)
