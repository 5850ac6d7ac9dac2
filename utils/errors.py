class ApiError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code = 500

    def __init__(self, message=None):
        super().__init__(message or self.__class__.__doc__)
        self.message = message or self.__class__.__doc__

    def to_dict(self):
        return {"success": False, "error": self.message}


class ValidationError(ApiError):
    """Invalid request data."""
    status_code = 400


class Unauthenticated(ApiError):
    """Unauthorized"""
    status_code = 401


class Forbidden(ApiError):
    """Forbidden"""
    status_code = 403


class NotFound(ApiError):
    """Not found"""
    status_code = 404


class Conflict(ApiError):
    """Conflict"""
    status_code = 409
