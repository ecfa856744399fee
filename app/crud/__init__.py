from app.crud.user import (
    get_user,
    create_user,
    complete_onboarding,
)
from app.crud.friends import FriendsCRUD

__all__ = [
    # User operations
    "get_user",
    "create_user",
    "complete_onboarding",

    # Friend graph store
    "FriendsCRUD"
]
