import uuid
from typing import Callable
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from app.utils.logger import set_request_context, clear_request_context, get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
CORRELATION_ID_HEADER = "X-Correlation-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Assigns every request an ID for log correlation.

    A client-supplied X-Correlation-ID wins over X-Request-ID; without
    either a uuid4 is generated. The ID is kept on ``request.state``, bound
    to the logging context for the duration of the request and echoed in
    the X-Request-ID response header.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        request_id = (
            request.headers.get(CORRELATION_ID_HEADER) or
            request.headers.get(REQUEST_ID_HEADER) or
            str(uuid.uuid4())
        )
        request.state.request_id = request_id
        set_request_context(request_id)

        logger.info(f"Request started: {request.method} {request.url.path}")

        try:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            logger.info(
                f"Request completed: {request.method} {request.url.path} - Status: {response.status_code}"
            )
            return response
        except Exception as e:
            logger.error(f"Request failed: {request.method} {request.url.path} - Error: {str(e)}")
            raise
        finally:
            clear_request_context()

