# API Routers
from app.routers import users, friends

__all__ = ["users", "friends"]
