class BlogError(Exception):
    """Base error rendered as a JSON body by the app's exception handler."""

    status_code = 500

    def __init__(self, message: str, **extra):
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_dict(self) -> dict:
        return {**self.extra, 'error': self.message}


class Conflict(BlogError):
    # the signup contract answers duplicates with 400, not 409
    status_code = 400


class Unauthorized(BlogError):
    status_code = 401


class NotFound(BlogError):
    status_code = 404


class InternalError(BlogError):
    status_code = 500
