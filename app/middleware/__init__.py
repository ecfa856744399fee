# Middleware package for the LetsChat API

from .request_id import RequestIDMiddleware
from .rate_limit import limiter, rate_limit_api_write, rate_limit_api_read

__all__ = [
    "RequestIDMiddleware",
    "limiter",
    "rate_limit_api_write",
    "rate_limit_api_read",
]
