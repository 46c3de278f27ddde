class DomainError(Exception):
    """Base exception for business rule violations."""

    @property
    def message(self) -> str:
        return str(self)


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthError(DomainError):
    """Raised when an operation needs a caller identity and none was given."""


class AuthenticationError(AuthError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a record with the given id does not exist."""


class InvalidStateError(DomainError):
    """Raised when a visit status transition is not permitted."""
