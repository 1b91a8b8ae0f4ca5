"""
Vector store backends.

- **InMemoryBackend**: in-process reference store with exact cosine ranking
- **RemoteBackendAdapter**: adapter over the remote vector database REST API

Both implement the VectorBackend contract; ``create_backend`` picks one from
a StoreConfig.
"""

from .base import VectorBackend
from .client import RemoteRequestError, RemoteVectorClient
from .factory import create_backend
from .memory import InMemoryBackend
from .remote import RemoteBackendAdapter

__all__ = [
    "VectorBackend",
    "InMemoryBackend",
    "RemoteBackendAdapter",
    "RemoteVectorClient",
    "RemoteRequestError",
    "create_backend",
]
