from fastapi import Depends, HTTPException, status, Header, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from firebase_admin import auth
from typing import Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.database import get_db
from app import crud, schemas
from app.utils.email_sender import send_welcome_email
from app.utils.logger import get_logger

logger = get_logger(__name__)

async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(HTTPBearer(auto_error=False)),
    x_user_id: Optional[str] = Header(None, alias="X-User-ID"),
    db: Session = Depends(get_db)
) -> schemas.CurrentUser:
    """
    Verify Firebase ID token and resolve the acting user.
    Falls back to X-User-ID header if bearer token is not provided.

    A verified Firebase identity seen for the first time is signed up:
    a user row is created and the welcome email is sent.

    Raises:
        HTTPException: If both token and X-User-ID are invalid or missing
    """
    if credentials is None and x_user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Either Bearer authentication or X-User-ID header is required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if credentials:
        try:
            decoded_token = auth.verify_id_token(credentials.credentials)
        except Exception as firebase_error:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=f"Invalid token: {str(firebase_error)}",
                headers={"WWW-Authenticate": "Bearer"},
            )

        user_id = decoded_token.get("uid")
        db_user = crud.get_user(db, user_id)
        if db_user is None:
            try:
                db_user = crud.create_user(
                    db,
                    user_id,
                    decoded_token.get("email"),
                    full_name=decoded_token.get("name") or "",
                    profile_pic=decoded_token.get("picture") or "",
                )
            except IntegrityError:
                # A concurrent first request from the same identity signed it up first
                db.rollback()
                db_user = crud.get_user(db, user_id)
                if db_user is None:
                    raise
                logger.info(f"User {user_id} was signed up by a concurrent request")
            else:
                logger.info(f"Signed up new user {user_id}")
                send_welcome_email(db_user.email, db_user.full_name)
    else:
        db_user = crud.get_user(db, x_user_id)
        if not db_user:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid X-User-ID",
            )

    # Lets the rate limiter key on the user instead of the client IP
    request.state.user_id = db_user.id

    return schemas.CurrentUser(
        id=db_user.id,
        email=db_user.email,
        full_name=db_user.full_name,
        is_onboarded=db_user.is_onboarded
    )
