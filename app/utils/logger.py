import logging
import contextvars
from typing import Optional

# Request ID for the request currently being served, visible across awaits
request_id_context: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar('request_id', default=None)

NO_REQUEST_ID = "no-request-id"


class RequestAwareFormatter(logging.Formatter):
    """
    Formatter that guarantees a ``request_id`` attribute on every record.

    Records logged through ``RequestAwareLogger`` already carry one; records
    from third-party loggers (uvicorn, sqlalchemy) pick it up from the
    current context or fall back to ``no-request-id``.
    """

    def format(self, record: logging.LogRecord) -> str:
        if not getattr(record, 'request_id', None):
            record.request_id = request_id_context.get() or NO_REQUEST_ID
        return super().format(record)


class RequestAwareLogger:
    """
    Thin wrapper over ``logging.Logger`` that attaches the request ID.

    Callers may pass ``request_id=...`` explicitly; otherwise the value set
    by ``RequestIDMiddleware`` for the current request is used.
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)
        self.name = name

    def _log_with_context(self, level: int, msg: str, *args, **kwargs):
        request_id = kwargs.pop('request_id', None) or request_id_context.get()
        if request_id:
            extra = kwargs.get('extra', {})
            extra['request_id'] = request_id
            kwargs['extra'] = extra
        self.logger.log(level, msg, *args, **kwargs)

    def debug(self, msg: str, *args, **kwargs):
        self._log_with_context(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs):
        self._log_with_context(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        self._log_with_context(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        self._log_with_context(logging.ERROR, msg, *args, **kwargs)

    def exception(self, msg: str, *args, **kwargs):
        kwargs['exc_info'] = True
        self._log_with_context(logging.ERROR, msg, *args, **kwargs)


def get_logger(name: str) -> RequestAwareLogger:
    """
    Get a request-aware logger for the specified name.

    Args:
        name: Logger name (usually __name__)

    Returns:
        RequestAwareLogger: A logger that automatically includes request context
    """
    return RequestAwareLogger(name)


def set_request_context(request_id: str):
    """Bind ``request_id`` to the current context for log correlation."""
    request_id_context.set(request_id)


def clear_request_context():
    request_id_context.set(None)
