class FormdeckError(Exception):
    """Base for failures talking to the forms backend."""


class AuthenticationError(FormdeckError):
    """Raised when the session token is missing, invalid, or rejected by the backend."""


class IntegrationError(FormdeckError):
    """Raised when a call to the forms backend fails."""


class RateLimitError(FormdeckError):
    """Raised when the forms backend rate limit is hit."""


class NotFoundError(FormdeckError):
    """Raised when the backend has no such form."""
