"""vector-docstore domain models."""

from .base import DocStoreBaseModel, TimestampedModel
from .config import InMemoryStoreOptions, Provider, RemoteStoreOptions, StoreConfig
from .documents import (
    DEFAULT_DIMENSION,
    DEFAULT_NAMESPACE,
    DEFAULT_TOP_K,
    Document,
    IndexDescriptor,
    IndexSpec,
    Metric,
    QueryOptions,
    QueryResult,
)
from .results import BatchResult, ItemFailure, OperationStatus, StatusCode

__all__ = [
    # Base models
    "DocStoreBaseModel",
    "TimestampedModel",

    # Documents and queries
    "DEFAULT_DIMENSION",
    "DEFAULT_NAMESPACE",
    "DEFAULT_TOP_K",
    "Document",
    "QueryOptions",
    "QueryResult",
    "Metric",
    "IndexDescriptor",
    "IndexSpec",

    # Results
    "StatusCode",
    "OperationStatus",
    "ItemFailure",
    "BatchResult",

    # Configuration
    "Provider",
    "StoreConfig",
    "InMemoryStoreOptions",
    "RemoteStoreOptions",
]
