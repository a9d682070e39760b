class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is missing, malformed or violates domain rules."""


class ConflictError(DomainError):
    """Raised when a unique key (e.g. an email) is already taken."""


class NotFoundError(DomainError):
    """Raised when an operation targets an id that does not exist."""


class DecodeError(DomainError):
    """Raised when stored or captured face data cannot be parsed."""


class StorageError(DomainError):
    """Raised when the underlying persistence layer fails.

    No partial write is committed when this is raised.
    """
