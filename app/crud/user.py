from sqlalchemy.orm import Session
from app.models import User
from typing import Optional

def get_user(db: Session, user_id: str) -> Optional[User]:
    """Get a user by ID."""
    return db.query(User).filter(User.id == user_id).first()

def create_user(db: Session, user_id: Optional[str], email: Optional[str], full_name: str = "", profile_pic: str = "") -> User:
    """
    Create a new user at signup.

    Args:
        db: Database session
        user_id: Identity provider UID, or None to generate one
        email: User email
        full_name: Name taken from the identity provider, if any
        profile_pic: Avatar URL

    Returns:
        Created User object
    """
    db_user = User(
        email=email,
        full_name=full_name or "",
        profile_pic=profile_pic or "",
        is_onboarded=False
    )
    if user_id:
        db_user.id = user_id

    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user

def complete_onboarding(db: Session, user: User, profile: dict) -> User:
    """
    Store the onboarding profile and mark the user as onboarded.

    Only onboarded users appear in other users' recommendations.
    """
    for field, value in profile.items():
        if value is None:
            continue
        if hasattr(user, field):
            setattr(user, field, value)
    user.is_onboarded = True

    db.commit()
    db.refresh(user)
    return user
