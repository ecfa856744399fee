from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import firebase_admin
from firebase_admin import credentials
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
import os

from app.config import settings
from app.database import Base, get_engine, get_pool_status
from app.logging_config import configure_logging
from app.middleware.rate_limit import limiter
from app.middleware.request_id import RequestIDMiddleware
from app.routers import friends, users
from app.services.errors import FriendsServiceError
from app.utils.logger import get_logger

# Configure logging first
configure_logging()
logger = get_logger(__name__)

# Initialize database tables
Base.metadata.create_all(bind=get_engine())

# Initialize Firebase Admin SDK with explicit credentials
firebase_app = None
if settings.FIREBASE_ENABLED:
    try:
        firebase_json_path = settings.FIREBASE_SERVICE_ACCOUNT_JSON
        if os.path.exists(firebase_json_path):
            cred = credentials.Certificate(firebase_json_path)
            firebase_app = firebase_admin.initialize_app(cred)
            logger.info("Initialized Firebase Admin with provided service account JSON")
        else:
            # Fallback to Application Default Credentials from the environment
            firebase_app = firebase_admin.initialize_app()
            logger.warning(f"FIREBASE_SERVICE_ACCOUNT_JSON not found at {firebase_json_path}. Initialized Firebase with default credentials.")
    except Exception as e:
        logger.exception(f"Failed to initialize Firebase Admin SDK: {e}")
        raise
else:
    logger.warning("Firebase disabled: only X-User-ID authentication is available")

# Conditional docs configuration
if settings.DEBUG:
    docs_config = {
        "docs_url": "/docs",
        "redoc_url": "/redoc",
        "openapi_url": "/openapi.json"
    }
    logger.info("DEBUG mode: Swagger docs enabled at /docs")
else:
    docs_config = {
        "docs_url": None,
        "redoc_url": None,
        "openapi_url": None
    }

app = FastAPI(
    title=settings.APP_NAME,
    description="Accounts and friend graph for the LetsChat language-exchange app",
    version="1.0.0",
    **docs_config
)

# Set up rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


async def friends_service_error_handler(request: Request, exc: FriendsServiceError):
    """Map classified friend-graph failures onto their HTTP status codes."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected ({exc.status_code}): {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


app.add_exception_handler(FriendsServiceError, friends_service_error_handler)

logger.info(f"CORS_ORIGINS: {settings.CORS_ORIGINS}")

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Added last so it wraps everything else and tags every log line
app.add_middleware(RequestIDMiddleware)

# Include routers
app.include_router(users.router)
app.include_router(friends.router)

@app.get("/")
async def root():
    return {"message": settings.APP_NAME, "version": "1.0.0"}

# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint for load balancers and monitoring."""
    return {"status": "healthy", "service": "letschat-api", "database_pool": get_pool_status()}
