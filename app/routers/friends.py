from fastapi import APIRouter, Depends, HTTPException, Request, status
from typing import List
from app.auth import get_current_user
from app.dependencies import get_friends_service
from app.middleware.rate_limit import rate_limit_api_write
from app.schemas import CurrentUser
from app.schemas.friends import (
    FriendRequestResponse, FriendResponse, FriendRequestsOverview,
    FriendRequestStatusResponse, FavoriteStatusResponse
)
from app.schemas.user import UserSummary
from app.services.errors import FriendsServiceError
from app.services.friends_service import FriendsService
from app.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/friends", tags=["friends"])


def _request_responses(requests) -> List[FriendRequestResponse]:
    return [FriendRequestResponse.model_validate(req) for req in requests]


@router.get("", response_model=List[FriendResponse])
async def get_my_friends(
    current_user: CurrentUser = Depends(get_current_user),
    service: FriendsService = Depends(get_friends_service)
):
    """Get the current user's friends, each flagged with whether it is a favorite"""
    try:
        return [
            FriendResponse(**UserSummary.model_validate(friend).model_dump(), is_favorite=is_favorite)
            for friend, is_favorite in service.list_friends(current_user.id)
        ]
    except FriendsServiceError:
        raise
    except Exception as e:
        logger.error(f"Error in get_my_friends: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

@router.post("/request/{recipient_id}", response_model=FriendRequestResponse, status_code=status.HTTP_201_CREATED)
@rate_limit_api_write
async def send_friend_request(
    request: Request,
    recipient_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: FriendsService = Depends(get_friends_service)
):
    """Send a friend request to another user"""
    try:
        friend_request = service.send_friend_request(current_user.id, recipient_id)
        return FriendRequestResponse.model_validate(friend_request)
    except FriendsServiceError:
        raise
    except Exception as e:
        logger.error(f"Error in send_friend_request: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

@router.post("/request/{request_id}/accept", response_model=FriendRequestStatusResponse)
@rate_limit_api_write
async def accept_friend_request(
    request: Request,
    request_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: FriendsService = Depends(get_friends_service)
):
    """Accept a friend request addressed to the current user"""
    try:
        friend_request = service.accept_friend_request(request_id, current_user.id)
        return FriendRequestStatusResponse(
            message="Friend request accepted",
            status=friend_request.status
        )
    except FriendsServiceError:
        raise
    except Exception as e:
        logger.error(f"Error in accept_friend_request: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

@router.get("/requests", response_model=FriendRequestsOverview)
async def get_friend_requests(
    current_user: CurrentUser = Depends(get_current_user),
    service: FriendsService = Depends(get_friends_service)
):
    """Get pending requests sent to the current user and the current user's accepted requests"""
    try:
        incoming, accepted = service.get_friend_requests(current_user.id)
        return FriendRequestsOverview(
            incoming_requests=_request_responses(incoming),
            accepted_requests=_request_responses(accepted)
        )
    except FriendsServiceError:
        raise
    except Exception as e:
        logger.error(f"Error in get_friend_requests: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

@router.get("/requests/outgoing", response_model=List[FriendRequestResponse])
async def get_outgoing_friend_requests(
    current_user: CurrentUser = Depends(get_current_user),
    service: FriendsService = Depends(get_friends_service)
):
    """Get the current user's requests that are still pending"""
    try:
        return _request_responses(service.list_outgoing_pending_requests(current_user.id))
    except FriendsServiceError:
        raise
    except Exception as e:
        logger.error(f"Error in get_outgoing_friend_requests: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

@router.post("/{friend_id}/favorite", response_model=FavoriteStatusResponse)
@rate_limit_api_write
async def add_favorite(
    request: Request,
    friend_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: FriendsService = Depends(get_friends_service)
):
    """Mark a friend as favorite"""
    try:
        service.add_favorite(current_user.id, friend_id)
        return FavoriteStatusResponse(success=True, message="Added to favorites")
    except FriendsServiceError:
        raise
    except Exception as e:
        logger.error(f"Error in add_favorite: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

@router.delete("/{friend_id}/favorite", response_model=FavoriteStatusResponse)
@rate_limit_api_write
async def remove_favorite(
    request: Request,
    friend_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    service: FriendsService = Depends(get_friends_service)
):
    """Unmark a favorite; succeeds even if the user was not a favorite"""
    try:
        service.remove_favorite(current_user.id, friend_id)
        return FavoriteStatusResponse(success=True, message="Removed from favorites")
    except FriendsServiceError:
        raise
    except Exception as e:
        logger.error(f"Error in remove_favorite: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
