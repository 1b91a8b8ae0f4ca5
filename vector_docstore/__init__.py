"""
vector-docstore - a provider-polymorphic vector document store.

This package provides one async API for storing embedded documents and
retrieving the ones most similar to a query vector:
- In-memory reference backend with exact cosine ranking
- Remote backend over the Upstash Vector REST API
- Index bookkeeping, structured errors and status objects shared by both
"""

__version__ = "0.1.0"

from .config.settings import Settings
from .core.exceptions import (
    CapabilityError,
    DocStoreError,
    InitializationError,
    OperationError,
    ValidationError,
)
from .core.store import DocumentStore
from .models import Document, IndexDescriptor, OperationStatus, QueryOptions, QueryResult
from .retrieval import DocumentRetriever

__all__ = [
    "DocumentStore",
    "DocumentRetriever",
    "Settings",
    "Document",
    "QueryOptions",
    "QueryResult",
    "IndexDescriptor",
    "OperationStatus",
    "DocStoreError",
    "ValidationError",
    "InitializationError",
    "OperationError",
    "CapabilityError",
]
