"""Utility functions and helpers."""

from .async_utils import ReadWriteLock, run_with_timeout
from .validation import (
    validate_document,
    validate_documents,
    validate_ids,
    validate_query_options,
    validate_store_config,
    validate_vector,
)

__all__ = [
    "ReadWriteLock",
    "run_with_timeout",
    "validate_document",
    "validate_documents",
    "validate_ids",
    "validate_query_options",
    "validate_store_config",
    "validate_vector",
]
