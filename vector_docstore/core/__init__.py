"""Core contracts: error taxonomy and index registry."""

from .exceptions import (
    CapabilityError,
    DocStoreError,
    InitializationError,
    OperationError,
    ValidationError,
)
from .registry import IndexRegistry

__all__ = [
    "DocStoreError",
    "ValidationError",
    "InitializationError",
    "OperationError",
    "CapabilityError",
    "IndexRegistry",
]
