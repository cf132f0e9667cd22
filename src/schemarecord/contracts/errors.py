# src/schemarecord/contracts/errors.py
"""Exception taxonomy for the record-mapping engine.

Dispatch errors (unknown property/method, missing parameters) are programmer
errors and propagate to the caller. Query errors propagate unrecovered.
Validation failure is NOT an exception - it is accumulated on the record.
"""

from enum import IntEnum


class ErrorCode(IntEnum):
    """Stable numeric codes carried by every RecordError."""

    UNKNOWN_PROPERTY = 1
    UNKNOWN_METHOD = 2
    MISSING_PARAMETERS = 4
    INVALID_SQL = 5
    NO_PRIMARY_KEY_FOUND = 7
    SCHEMA_NOT_FOUND = 9
    TRANSACTION_STATE = 11
    MODEL_NOT_FOUND = 12


_HUMANIZED: dict[ErrorCode, str] = {
    ErrorCode.UNKNOWN_PROPERTY: "Unknown Property",
    ErrorCode.UNKNOWN_METHOD: "Unknown Method",
    ErrorCode.MISSING_PARAMETERS: "You are missing some parameters in your function call",
    ErrorCode.INVALID_SQL: "The SQL is invalid",
    ErrorCode.NO_PRIMARY_KEY_FOUND: "Table has no primary key defined",
    ErrorCode.SCHEMA_NOT_FOUND: "No columns could be discovered for table",
    ErrorCode.TRANSACTION_STATE: "Invalid transaction state",
    ErrorCode.MODEL_NOT_FOUND: "No model registered for table",
}


class RecordError(Exception):
    """Base class for all schemarecord errors."""

    code: ErrorCode = ErrorCode.INVALID_SQL

    def humanize(self) -> str:
        """Return a readable label for this error's code."""
        return _HUMANIZED.get(self.code, "Unknown Exception")


class UnknownPropertyError(RecordError, AttributeError):
    """Raised when a column or relation name does not exist on the record."""

    code = ErrorCode.UNKNOWN_PROPERTY


class UnknownMethodError(RecordError, AttributeError):
    """Raised when a dynamic method name matches no dispatch pattern."""

    code = ErrorCode.UNKNOWN_METHOD


class MissingParametersError(RecordError):
    """Raised when a dynamic name lacks its suffix or a finder's arity is wrong."""

    code = ErrorCode.MISSING_PARAMETERS


class SchemaError(RecordError):
    """Raised when a table has no discoverable columns or lacks a primary key."""

    code = ErrorCode.SCHEMA_NOT_FOUND

    def __init__(self, message: str, *, code: ErrorCode = ErrorCode.SCHEMA_NOT_FOUND) -> None:
        super().__init__(message)
        self.code = code


class QueryError(RecordError):
    """Raised when the underlying statement fails.

    Attributes:
        sql: The statement text that failed
    """

    code = ErrorCode.INVALID_SQL

    def __init__(self, message: str, *, sql: str | None = None) -> None:
        super().__init__(message)
        self.sql = sql


class TransactionError(RecordError):
    """Raised on nested begin, or commit/rollback with no active transaction."""

    code = ErrorCode.TRANSACTION_STATE


class ModelNotFoundError(RecordError):
    """Raised by strict registry lookups for tables with no registered model."""

    code = ErrorCode.MODEL_NOT_FOUND
