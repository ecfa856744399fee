import os
import sys

# Add the parent directory to the path so we can import app modules
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.crud.friends import FriendsCRUD
from app.database import Base, get_engine, get_session_local
from app.logging_config import configure_logging
from app.services.friends_service import FriendsService
from app.utils.logger import get_logger

logger = get_logger(__name__)

def init_db() -> int:
    """
    Create missing tables and reconcile friend edges with accepted requests.

    Returns the number of friend edges that had to be repaired.
    """
    Base.metadata.create_all(bind=get_engine())
    logger.info("Database tables checked")

    db = get_session_local()()
    try:
        repaired = FriendsService(FriendsCRUD(db)).repair_friendships()
    finally:
        db.close()

    logger.info(f"Database initialization check complete ({repaired} friend edge(s) repaired)")
    return repaired

if __name__ == "__main__":
    configure_logging()
    init_db()
