"""
Custom exceptions for data-structure store operations.

Every store error carries an ``ErrorKind`` produced by the DynamoDB client
adapter, so callers branch on the kind instead of on exception names.
"""

from enum import Enum


class ErrorKind(Enum):
    """Closed classification of backing-store failures."""

    CONDITION_FAILED = "condition_failed"
    TRANSACTION_CONFLICT = "transaction_conflict"
    TRANSPORT = "transport"
    NOT_FOUND = "not_found"
    INVALID = "invalid"


class KVStoreError(Exception):
    """Base exception for store operations."""

    kind: ErrorKind = ErrorKind.TRANSPORT


class ConditionFailedError(KVStoreError):
    """Conditional write precondition did not hold.

    Always recovered inside the library and turned into a boolean or an
    exclusion from a result set.
    """

    kind = ErrorKind.CONDITION_FAILED


class TransactionConflictError(KVStoreError):
    """A concurrent transaction interfered. Safe to retry."""

    kind = ErrorKind.TRANSACTION_CONFLICT


class TransportError(KVStoreError):
    """Network or service failure talking to DynamoDB."""

    kind = ErrorKind.TRANSPORT


class AWSThrottlingError(TransportError):
    """DynamoDB throttling occurred."""

    pass


class AWSPermissionError(TransportError):
    """AWS permission denied."""

    pass


class TableNotFoundError(KVStoreError):
    """DynamoDB table does not exist."""

    kind = ErrorKind.NOT_FOUND


class TableAlreadyExistsError(KVStoreError):
    """DynamoDB table already exists."""

    kind = ErrorKind.INVALID


class UnsupportedValueError(KVStoreError):
    """Value is not a str, int, float or bytes."""

    kind = ErrorKind.INVALID


class ReservedKeyError(KVStoreError):
    """Key falls inside the reserved internal namespace."""

    kind = ErrorKind.INVALID


class PartialOperationError(KVStoreError):
    """A non-atomic multi-step operation failed part way through.

    Attributes:
        completed: Number of steps that finished before the failure
    """

    def __init__(self, message: str, completed: int):
        super().__init__(message)
        self.completed = completed

    @property
    def kind(self) -> ErrorKind:  # type: ignore[override]
        cause = self.__cause__
        if isinstance(cause, KVStoreError):
            return cause.kind
        return ErrorKind.TRANSPORT
