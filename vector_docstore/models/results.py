"""Operation result models for vector-docstore."""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import Field

from .base import DocStoreBaseModel


class StatusCode(str, Enum):
    """Outcome of a single-item operation."""

    SUCCESS = "success"
    NOT_FOUND = "not_found"
    ERROR = "error"


class OperationStatus(DocStoreBaseModel):
    """Status object returned by index and single-item operations."""

    status: StatusCode = Field(description="Outcome of the operation")
    message: str = Field(default="", description="Human-readable outcome")
    details: Dict[str, Any] = Field(
        default_factory=dict,
        description="Extra information (config, cause, noop flag)"
    )

    @property
    def ok(self) -> bool:
        """Whether the operation succeeded."""
        return self.status == StatusCode.SUCCESS

    @classmethod
    def success(cls, message: str, **details: Any) -> "OperationStatus":
        return cls(status=StatusCode.SUCCESS, message=message, details=details)

    @classmethod
    def not_found(cls, message: str, **details: Any) -> "OperationStatus":
        return cls(status=StatusCode.NOT_FOUND, message=message, details=details)

    @classmethod
    def error(cls, message: str, **details: Any) -> "OperationStatus":
        return cls(status=StatusCode.ERROR, message=message, details=details)


class ItemFailure(DocStoreBaseModel):
    """A per-document or per-id failure inside a batch operation."""

    id: str = Field(description="Document id that failed")
    message: str = Field(description="Why the item failed")
    error_code: Optional[str] = Field(default=None, description="Error code, if any")


class BatchResult(DocStoreBaseModel):
    """Result of a batch upsert or delete."""

    count: int = Field(ge=0, description="Number of items actually written or deleted")
    failures: List[ItemFailure] = Field(
        default_factory=list,
        description="Items skipped because of per-item failures"
    )

    @property
    def failed_ids(self) -> List[str]:
        return [failure.id for failure in self.failures]
