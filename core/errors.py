# ABOUTME: Error taxonomy shared by the forum services and the HTTP layer
# ABOUTME: Each error carries its HTTP status and whether the frontend should show it inline on a form


class ForumError(Exception):
    """Base class for errors that are reported to API clients."""

    status_code = 500
    is_form_error = False

    def __init__(self, message: str, is_form_error: bool | None = None):
        super().__init__(message)
        self.message = message
        if is_form_error is not None:
            self.is_form_error = is_form_error


class UnauthenticatedError(ForumError):
    """No session, or the session is invalid or expired."""

    status_code = 401

    def __init__(self, message: str = "Not authenticated", is_form_error: bool | None = None):
        super().__init__(message, is_form_error)


class NotFoundError(ForumError):
    """A referenced post or comment does not exist."""

    status_code = 404


class ConflictError(ForumError):
    """Unique value already taken (duplicate username)."""

    status_code = 409
    is_form_error = True


class ValidationError(ForumError):
    """Missing or malformed client input."""

    status_code = 400
    is_form_error = True


class InternalError(ForumError):
    """Unexpected failure in the store or runtime."""

    status_code = 500

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message, is_form_error=False)
