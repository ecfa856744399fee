from logging.config import dictConfig

from app.config import settings
from app.utils.logger import RequestAwareFormatter


LOG_LEVEL = "DEBUG" if settings.DEBUG else "INFO"

# Central logging configuration
LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "()": RequestAwareFormatter,
            "format": "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] - %(message)s",
        },
        "access": {
            "()": RequestAwareFormatter,
            "format": "%(asctime)s - %(levelname)s - [%(request_id)s] - %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "default",
        },
        "access_console": {
            "class": "logging.StreamHandler",
            "formatter": "access",
        },
    },
    "root": {
        "level": LOG_LEVEL,
        "handlers": ["console"],
    },
    "loggers": {
        "app": {  # Catch-all logger for all app modules
            "level": LOG_LEVEL,
            "handlers": ["console"],
            "propagate": False,
        },
        "uvicorn.error": {
            "level": "INFO",
            "handlers": ["console"],
            "propagate": False,
        },
        "uvicorn.access": {
            "level": "INFO",
            "handlers": ["access_console"],
            "propagate": False,
        },
        # SQL echo is controlled by DEBUG on the engine itself
        "sqlalchemy.engine": {
            "level": "WARNING",
            "handlers": ["console"],
            "propagate": False,
        },
    },
}

def configure_logging():
    """Configure logging for the application."""
    dictConfig(LOGGING_CONFIG)
