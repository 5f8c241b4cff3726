class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class MalformedEventError(ValidationError):
    """Raised when an event has an unknown kind or an unparseable timestamp."""


class AuthenticationError(DomainError):
    """Raised when the admin password or a session token is invalid."""


class AuthorizationError(DomainError):
    """Raised when a session lacks permission for an action."""


class ConflictError(DomainError):
    """Raised when a versioned write loses against a concurrent writer."""


class StoreUnavailableError(DomainError):
    """Raised when the backing store cannot be reached."""
