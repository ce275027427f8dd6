class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced worker, folder, advance or report does not exist."""


class SettlementConsistencyError(DomainError):
    """Raised when a report could not be exported, so advances were left unsettled."""


class StorageError(Exception):
    """Raised when the key-value store cannot be read or written."""


class CorruptRecordError(StorageError):
    """Raised when a persisted record does not match its expected shape."""
