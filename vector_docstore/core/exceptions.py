"""Custom exceptions for vector-docstore."""

from enum import Enum
from typing import Any, Dict, List, Optional


class Operation(str, Enum):
    """Store verbs that can fail while executing."""

    UPSERT = "upsert"
    QUERY = "query"
    DELETE = "delete"
    CREATE_INDEX = "create_index"
    LIST_INDEXES = "list_indexes"
    DESCRIBE_INDEX = "describe_index"
    DELETE_INDEX = "delete_index"
    UPDATE_BY_ID = "update_by_id"
    DELETE_BY_ID = "delete_by_id"


class DocStoreError(Exception):
    """Base exception for all vector-docstore errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        """String representation of the error."""
        parts = [self.message]
        if self.error_code:
            parts.append(f"(code: {self.error_code})")
        return " ".join(parts)

    @property
    def cause(self) -> Optional[BaseException]:
        """The underlying exception, if one was recorded."""
        return self.details.get("cause") or self.__cause__

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        details = dict(self.details)
        if isinstance(details.get("cause"), BaseException):
            cause = details["cause"]
            details["cause"] = f"{type(cause).__name__}: {cause}"
        return {
            "error": self.message,
            "error_code": self.error_code,
            "details": details,
        }


class ValidationError(DocStoreError):
    """Raised when configuration, documents or request arguments are invalid."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        details: Dict[str, Any] = {"field": field} if field else {}
        if cause is not None:
            details["cause"] = cause
        super().__init__(message, "VALIDATION_ERROR", details)


class DimensionMismatchError(ValidationError):
    """Raised when an embedding does not match its namespace dimension."""

    def __init__(self, namespace: str, expected: int, actual: int) -> None:
        super().__init__(
            f"Embedding dimension {actual} does not match index '{namespace}' "
            f"dimension {expected}",
            "embedding",
        )
        self.details.update(
            {"namespace": namespace, "expected": expected, "actual": actual}
        )


class InitializationError(DocStoreError):
    """Raised when a backend or its client cannot be constructed."""

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        details: Dict[str, Any] = {"provider": provider} if provider else {}
        if cause is not None:
            details["cause"] = cause
        super().__init__(message, "INITIALIZATION_ERROR", details)


class CapabilityError(DocStoreError):
    """Raised when the active backend does not support an operation."""

    def __init__(self, operation: str, provider: str) -> None:
        super().__init__(
            f"Provider {provider} does not support {operation}",
            "CAPABILITY_ERROR",
            {"operation": operation, "provider": provider},
        )
        self.operation = operation
        self.provider = provider


class OperationError(DocStoreError):
    """Raised when a store operation fails while executing."""

    operation: Optional[Operation] = None
    code: str = "operation_failed"

    def __init__(
        self,
        message: str,
        namespace: Optional[str] = None,
        ids: Optional[List[str]] = None,
        cause: Optional[BaseException] = None,
        **extra: Any,
    ) -> None:
        details: Dict[str, Any] = {}
        if self.operation is not None:
            details["operation"] = self.operation.value
        if namespace is not None:
            details["namespace"] = namespace
        if ids:
            details["ids"] = list(ids)
        if cause is not None:
            details["cause"] = cause
        details.update(extra)
        super().__init__(message, self.code, details)


class UpsertError(OperationError):
    """Raised when a batch upsert fails at the backend level."""

    operation = Operation.UPSERT
    code = "upsert_failed"


class QueryError(OperationError):
    """Raised when a similarity query fails."""

    operation = Operation.QUERY
    code = "query_failed"


class DeleteError(OperationError):
    """Raised when a batch delete fails at the backend level."""

    operation = Operation.DELETE
    code = "delete_failed"


class CreateIndexError(OperationError):
    """Raised when an index cannot be created."""

    operation = Operation.CREATE_INDEX
    code = "create_index_failed"


class ListIndexesError(OperationError):
    """Raised when indexes cannot be listed."""

    operation = Operation.LIST_INDEXES
    code = "list_indexes_failed"


class DescribeIndexError(OperationError):
    """Raised when an index cannot be described."""

    operation = Operation.DESCRIBE_INDEX
    code = "describe_index_failed"


class DeleteIndexError(OperationError):
    """Raised when an index cannot be deleted."""

    operation = Operation.DELETE_INDEX
    code = "delete_index_failed"


class UpdateError(OperationError):
    """Raised when updating a vector by id fails at the backend level."""

    operation = Operation.UPDATE_BY_ID
    code = "update_vector_failed"


OPERATION_ERRORS = {
    cls.operation: cls
    for cls in (
        UpsertError,
        QueryError,
        DeleteError,
        CreateIndexError,
        ListIndexesError,
        DescribeIndexError,
        DeleteIndexError,
        UpdateError,
    )
}


def operation_error_for(operation: Operation) -> type:
    """Return the OperationError subclass raised for a verb."""
    return OPERATION_ERRORS.get(operation, OperationError)
