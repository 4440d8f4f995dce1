class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""


class FeeNotConfiguredError(NotFoundError):
    """Raised when a student's class has no fee configuration yet."""


class InvalidTransitionError(DomainError):
    """Raised when a leave request is decided after it has left PENDING."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""
