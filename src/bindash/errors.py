"""Error taxonomy for the reports core.

Each error carries the HTTP status the API layer maps it to. Messages are
safe to show to the caller; internal details go to the server log only.
"""


class BindashError(Exception):
    status_code = 500
    default_message = "Internal Server Error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(BindashError):
    """Bad or missing input. Raised before any side effect."""

    status_code = 400
    default_message = "Invalid input"


class BadRequest(BindashError):
    status_code = 400
    default_message = "Bad request"


class AuthorizationError(BindashError):
    status_code = 403
    default_message = "Forbidden"


class NotFoundError(BindashError):
    status_code = 404
    default_message = "Not found"


class PathRejected(BindashError):
    """A stored file reference resolved outside the storage root (or not at all)."""

    status_code = 403
    default_message = "Invalid file path"


class StoreFault(BindashError):
    default_message = "Database error occurred"


class GenerationFault(BindashError):
    """Producing or writing a report file failed. Recorded as a failed report, not raised to the caller."""

    default_message = "Failed to generate report file."


class CreationFailed(BindashError):
    default_message = "Failed to create report. Check server logs."
