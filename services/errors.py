"""
Error taxonomy for the feedback backend.

Each error carries the HTTP status it maps to and a public message that is
safe to show to the caller. Internal detail stays in the logs.
"""


class FeedbackError(Exception):
    status_code = 500
    public_message = "Server error."

    def __init__(self, message: str | None = None):
        self.message = message or self.public_message
        super().__init__(self.message)

    @property
    def headers(self) -> dict[str, str] | None:
        return None


class ValidationError(FeedbackError):
    status_code = 400
    public_message = "Invalid submission."


class PersistenceError(FeedbackError):
    """Storage failure. The message is logged, never returned."""

    status_code = 500
    public_message = "Server error."

    def __init__(self, message: str | None = None, operation: str = "query"):
        self.operation = operation
        super().__init__(message)


class AuthRequiredError(FeedbackError):
    status_code = 401
    public_message = "Authentication required"
    realm = "Admin"

    @property
    def headers(self) -> dict[str, str] | None:
        return {"WWW-Authenticate": f'Basic realm="{self.realm}"'}


class AccessDeniedError(FeedbackError):
    status_code = 403
    public_message = "Access denied"


class InitializationError(FeedbackError):
    """Startup could not reach a usable database. Fatal."""
