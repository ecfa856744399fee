from fastapi import status


class FriendsServiceError(Exception):
    """Base class for classified friend-graph failures."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(FriendsServiceError):
    """Malformed or self-referential input, rejected before touching the store."""
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(FriendsServiceError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(FriendsServiceError):
    """The action would violate a relationship invariant."""
    status_code = status.HTTP_409_CONFLICT


class ForbiddenError(FriendsServiceError):
    status_code = status.HTTP_403_FORBIDDEN


class UnavailableError(FriendsServiceError):
    """Store or network failure. The message is safe to show to clients."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
