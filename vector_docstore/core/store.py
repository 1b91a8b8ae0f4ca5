"""DocumentStore: the provider-agnostic facade over a vector backend."""

from collections.abc import Mapping, Sequence
from typing import Any, List, Optional, Union

from ..backends import VectorBackend, create_backend
from ..config.logging import LoggerMixin
from ..models.config import StoreConfig
from ..models.documents import IndexDescriptor, Metric, QueryOptions, QueryResult
from ..models.results import BatchResult, OperationStatus
from ..utils.validation import validate_query_options, validate_store_config
from .exceptions import Operation
from .registry import IndexRegistry


class DocumentStore(LoggerMixin):
    """Uniform async API for storing and searching embedded documents.

    The backend is chosen once, from ``config.provider``, when the store is
    constructed; every call is forwarded to it unchanged. Verbs the backend
    does not implement raise CapabilityError.

    Example::

        async with DocumentStore({"provider": "in-memory"}) as store:
            await store.upsert([{"id": "1", "text": "hi", "embedding": [1.0, 0.0]}])
            hits = await store.query([1.0, 0.0], {"topK": 3})
    """

    def __init__(self, config: Union[StoreConfig, Mapping], logger=None) -> None:
        self._logger = logger
        self.config = validate_store_config(config)
        self.registry = IndexRegistry(logger=logger)
        self.backend: VectorBackend = create_backend(
            self.config, registry=self.registry, logger=logger
        )
        self._initialized = False
        self.logger.info("Document store created", provider=self.provider)

    @property
    def provider(self) -> str:
        """Identifier of the active backend."""
        return self.backend.provider_name

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> None:
        """Acquire backend resources (HTTP session for the remote backend)."""
        if self._initialized:
            return
        await self.backend.initialize()
        self._initialized = True

    async def close(self) -> None:
        """Release backend resources."""
        await self.backend.close()
        self._initialized = False

    async def __aenter__(self) -> "DocumentStore":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def _require(self, operation: Operation) -> None:
        if not self.backend.supports(operation):
            self.logger.warning(
                "Unsupported operation requested",
                operation=operation.value,
                provider=self.provider,
            )
            raise self.backend.unsupported_error(operation)

    async def upsert(
        self,
        documents: Sequence[Any],
        namespace: Optional[str] = None,
    ) -> BatchResult:
        """Insert or fully replace documents; per-document failures are collected."""
        self._require(Operation.UPSERT)
        return await self.backend.upsert(documents, namespace=namespace)

    async def query(
        self,
        vector: Sequence[float],
        options: Union[QueryOptions, Mapping, None] = None,
    ) -> List[QueryResult]:
        """Return up to ``top_k`` documents ordered by descending similarity."""
        self._require(Operation.QUERY)
        return await self.backend.query(vector, validate_query_options(options))

    async def delete(
        self,
        ids: Sequence[str],
        namespace: Optional[str] = None,
    ) -> BatchResult:
        """Delete documents by id; ``count`` only counts ids that existed."""
        self._require(Operation.DELETE)
        return await self.backend.delete(ids, namespace=namespace)

    async def create_index(
        self,
        name: str,
        dimension: int,
        metric: Union[Metric, str] = Metric.COSINE,
    ) -> OperationStatus:
        self._require(Operation.CREATE_INDEX)
        return await self.backend.create_index(name, dimension, metric)

    async def list_indexes(self) -> List[str]:
        self._require(Operation.LIST_INDEXES)
        return await self.backend.list_indexes()

    async def describe_index(self, name: str) -> IndexDescriptor:
        self._require(Operation.DESCRIBE_INDEX)
        return await self.backend.describe_index(name)

    async def delete_index(self, name: str) -> OperationStatus:
        self._require(Operation.DELETE_INDEX)
        return await self.backend.delete_index(name)

    async def update_by_id(
        self,
        name: str,
        id: str,
        vector: Optional[Sequence[float]] = None,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> OperationStatus:
        """Replace a document's vector and/or shallow-merge its metadata."""
        self._require(Operation.UPDATE_BY_ID)
        return await self.backend.update_by_id(name, id, vector=vector, metadata=metadata)

    async def delete_by_id(self, name: str, id: str) -> OperationStatus:
        """Delete one document; failures come back as a status, never raised."""
        self._require(Operation.DELETE_BY_ID)
        return await self.backend.delete_by_id(name, id)
