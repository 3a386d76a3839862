class ApiError(Exception):
    """Base class for errors that map to a client-facing HTTP status."""

    status_code = 500
    title = "Internal Server Error"

    def __init__(self, message=None):
        super().__init__(message or self.title)
        self.message = message or self.title


class BadRequestError(ApiError):
    status_code = 400
    title = "Bad Request"


class AuthenticationError(ApiError):
    status_code = 401
    title = "Unauthorized"


class UnauthorizedError(ApiError):
    status_code = 403
    title = "Forbidden"


class NotFoundError(ApiError):
    status_code = 404
    title = "Not Found"


class EventFullError(ApiError):
    status_code = 409
    title = "Event Full"


class RegistrationClosedError(ApiError):
    status_code = 403
    title = "Registration Closed"


class DuplicateRegistrationError(ApiError):
    status_code = 409
    title = "Duplicate Registration"


class MissingFieldsError(BadRequestError):
    def __init__(self, fields):
        super().__init__("Missing required fields")
        self.fields = fields
