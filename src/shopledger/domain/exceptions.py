"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI and HTTP layers can catch them uniformly and map them to a
user-friendly message (and, over HTTP, a status code).
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """Input is missing or malformed, or a business rule was violated."""


class InvalidRating(ValidationError):
    """A review rating outside the 1..5 range."""


class InvalidStateTransition(DomainException):
    """An order or payment status move not allowed by the state machine."""


class NotFoundError(DomainException):
    """A requested entity does not exist."""


class ConflictError(DomainException):
    """The write conflicts with the current state of the store."""


class DuplicateCode(ConflictError):
    """An active coupon with the same normalized code already exists."""


class DuplicateReview(ConflictError):
    """The user has already reviewed this product."""


class CouponExhausted(ConflictError):
    """The coupon can no longer be redeemed."""


class InsufficientStock(ConflictError):
    """At least one line item asks for more units than are in stock."""


class UnauthorizedError(DomainException):
    """Missing, expired or invalid credentials for a privileged operation."""


class DependencyError(DomainException):
    """The document store or the email provider failed or timed out."""
