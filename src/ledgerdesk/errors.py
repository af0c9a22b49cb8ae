from abc import ABC


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class NotFoundError(UserError):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str = "Document not found") -> None:
        super().__init__(message)


class ValidationError(UserError):
    """Raised when user input fails validation."""


class InvalidItemsError(ValidationError):
    """Raised when a line item list is empty or contains a malformed item."""

    def __init__(self, message: str = "At least one item is required") -> None:
        super().__init__(message)


class StoreUnavailableError(Exception):
    """Raised when the database cannot serve a request.

    Retriable infrastructure failure, never shown to the user in detail.
    """


class AllocationExhaustedError(Exception):
    """Raised when the sequence counter could not be incremented within the retry budget.

    Internal to identifier allocation: the allocator handles it by issuing a fallback identifier.
    """
