class DomainError(Exception):
    """Base exception for business rule violations."""

    kind = "DomainError"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    kind = "ValidationError"


class AuthenticationError(DomainError):
    """Raised when the caller cannot be identified."""

    kind = "AuthenticationError"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    kind = "AuthorizationError"


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""

    kind = "NotFound"


# Approval workflow failures. Every one of them leaves the request unchanged.


class NotAuthorized(AuthorizationError):
    """Role has no stage, or may not act on the stage right now."""

    kind = "NotAuthorized"


class AlreadyTerminal(DomainError):
    """Request is already rejected or fully approved/acknowledged."""

    kind = "AlreadyTerminal"


class MissingRemarks(ValidationError):
    """Rejection at a non-terminal stage without remarks."""

    kind = "MissingRemarks"


class InvalidDecision(ValidationError):
    """Decision is unknown or not accepted at the acting stage."""

    kind = "InvalidDecision"


class ConcurrentModification(DomainError):
    """The stage changed between read and write."""

    kind = "ConcurrentModification"
