from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session
from typing import List
from app.utils.logger import get_logger

from app.database import get_db
from app.auth import get_current_user
from app import schemas, crud
from app.dependencies import get_friends_service
from app.middleware.rate_limit import rate_limit_api_read
from app.services.errors import FriendsServiceError
from app.services.friends_service import FriendsService

router = APIRouter(
    prefix="/users",
    tags=["users"],
    responses={404: {"description": "Not found"}}
)

logger = get_logger(__name__)

@router.get("/me", response_model=schemas.UserResponse)
async def get_me(
    current_user: schemas.CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get the current user's full record."""
    db_user = crud.get_user(db, current_user.id)
    if not db_user:
        raise HTTPException(status_code=404, detail="User not found")
    return db_user

@router.put("/me/onboarding", response_model=schemas.UserResponse)
async def complete_onboarding(
    profile: schemas.OnboardingRequest,
    current_user: schemas.CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Save the language-exchange profile and mark the user as onboarded.

    Onboarded users become visible in other users' recommendations.
    """
    try:
        db_user = crud.get_user(db, current_user.id)
        if not db_user:
            raise HTTPException(status_code=404, detail="User not found")

        db_user = crud.complete_onboarding(db, db_user, profile.model_dump())
        logger.info(f"User {current_user.id} completed onboarding")
        return db_user

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error completing onboarding for user {current_user.id}: {e}")
        db.rollback()
        raise HTTPException(status_code=500, detail="Internal server error")

@router.get("/recommended", response_model=List[schemas.UserSummary])
@rate_limit_api_read
async def get_recommended_users(
    request: Request,
    current_user: schemas.CurrentUser = Depends(get_current_user),
    service: FriendsService = Depends(get_friends_service)
):
    """Onboarded users who are neither the current user nor already friends."""
    try:
        return service.list_recommended_users(current_user.id)
    except FriendsServiceError:
        raise
    except Exception as e:
        logger.error(f"Error in get_recommended_users: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
