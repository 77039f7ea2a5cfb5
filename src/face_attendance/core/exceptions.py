class DomainError(Exception):
    """Base exception for attendance domain failures."""


class ValidationError(DomainError):
    """Raised when request input is invalid."""


class StorageError(DomainError):
    """Raised by key-value backends when a read or write fails."""


class CorruptPayloadError(DomainError):
    """Raised when a persisted payload is not a JSON array of records."""
