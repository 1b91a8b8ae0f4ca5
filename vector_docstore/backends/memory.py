"""In-process reference backend with exact cosine ranking."""

import copy
from collections.abc import Callable, Mapping, Sequence
from typing import Any, Dict, List, Optional, Union

from ..core.exceptions import (
    CreateIndexError,
    DeleteError,
    DeleteIndexError,
    DescribeIndexError,
    DocStoreError,
    QueryError,
    UpsertError,
    ValidationError,
)
from ..core.registry import IndexRegistry
from ..models.documents import (
    DEFAULT_DIMENSION,
    DEFAULT_NAMESPACE,
    Document,
    IndexDescriptor,
    Metric,
    QueryOptions,
    QueryResult,
)
from ..models.results import BatchResult, ItemFailure, OperationStatus
from ..utils.async_utils import ReadWriteLock
from ..utils.validation import (
    validate_documents,
    validate_ids,
    validate_index_args,
    validate_vector,
)
from .base import ALL_OPERATIONS, DocumentInput, VectorBackend
from .similarity import ScoredCandidate, rank

MetadataPredicate = Callable[[Dict[str, Any]], bool]


def build_metadata_filter(filter: Any) -> Optional[MetadataPredicate]:
    """Turn a query filter into a predicate over document metadata.

    A mapping matches documents whose metadata holds every key with an equal
    value; a callable is used as the predicate directly.
    """
    if filter is None:
        return None
    if callable(filter):
        return filter
    if isinstance(filter, Mapping):
        expected = dict(filter)
        return lambda metadata: all(
            key in metadata and metadata[key] == value
            for key, value in expected.items()
        )
    raise ValidationError(
        f"Unsupported filter for the in-memory backend: {type(filter).__name__} "
        "(expected a mapping or a callable)",
        "filter",
    )


class InMemoryBackend(VectorBackend):
    """Reference store keeping every namespace in a dict.

    Not suitable for production: nothing is persisted and ranking is a
    brute-force scan of the namespace.
    """

    capabilities = ALL_OPERATIONS

    def __init__(
        self,
        namespace: str = DEFAULT_NAMESPACE,
        default_dimension: int = DEFAULT_DIMENSION,
        registry: Optional[IndexRegistry] = None,
        logger=None,
    ) -> None:
        super().__init__(namespace, default_dimension, registry, logger)
        self._namespaces: Dict[str, Dict[str, Document]] = {}
        self._lock = ReadWriteLock()

    @property
    def provider_name(self) -> str:
        return "in-memory"

    async def initialize(self) -> None:
        self.logger.warning(
            "Using the in-memory vector store; data is not persisted",
            namespace=self.namespace,
        )

    async def close(self) -> None:
        self.logger.info("In-memory vector store closed", namespaces=len(self._namespaces))

    async def upsert(
        self,
        documents: Sequence[DocumentInput],
        namespace: Optional[str] = None,
    ) -> BatchResult:
        namespace = self._resolve_namespace(namespace)
        valid, failures = validate_documents(documents)
        if not valid:
            return BatchResult(count=0, failures=failures)

        try:
            async with self._lock.write():
                store = self._namespaces.setdefault(namespace, {})
                self.registry.touch(namespace)
                written = 0
                for document in valid:
                    try:
                        self._write(namespace, store, document)
                    except ValidationError as e:
                        self.logger.warning(
                            "Document rejected", namespace=namespace, id=document.id, error=e.message
                        )
                        failures.append(
                            ItemFailure(id=document.id, message=e.message, error_code=e.error_code)
                        )
                        continue
                    written += 1
                total = len(store)
        except DocStoreError:
            raise
        except Exception as e:
            self.logger.error("Failed to upsert documents", namespace=namespace, error=str(e))
            raise UpsertError(
                f"Failed to upsert documents: {e}",
                namespace=namespace,
                ids=[d.id for d in valid],
                cause=e,
            ) from e

        self.logger.debug(
            "Upserted documents", namespace=namespace, count=written, total=total
        )
        return BatchResult(count=written, failures=failures)

    def _write(self, namespace: str, store: Dict[str, Document], document: Document) -> None:
        """Full-replace a single document; caller holds the write lock."""
        self.registry.check_dimension(namespace, document.embedding)
        if document.embedding is not None:
            self.registry.observe(namespace, len(document.embedding))
        store[document.id] = document.model_copy(deep=True)

    async def query(
        self,
        vector: Sequence[float],
        options: QueryOptions,
    ) -> List[QueryResult]:
        namespace = self._resolve_namespace(options.namespace)
        query_vector = validate_vector(vector)
        predicate = build_metadata_filter(options.filter)

        try:
            async with self._lock.read():
                documents = self._namespaces.get(namespace, {}).values()
                ranking = rank(
                    query_vector,
                    (
                        (document, document.embedding)
                        for document in documents
                        if predicate is None or predicate(document.metadata)
                    ),
                    options.top_k,
                )
                results = [self._to_result(hit, options) for hit in ranking.hits]
        except DocStoreError:
            raise
        except Exception as e:
            self.logger.error("Failed to query documents", namespace=namespace, error=str(e))
            raise QueryError(f"Failed to query documents: {e}", namespace=namespace, cause=e) from e

        if ranking.skipped:
            self.logger.warning(
                "Skipped documents with mismatched embedding dimension",
                namespace=namespace,
                query_dimension=len(query_vector),
                ids=[document.id for document in ranking.skipped],
            )
        self.logger.debug(
            "Query completed", namespace=namespace, top_k=options.top_k, results=len(results)
        )
        return results

    @staticmethod
    def _to_result(hit: ScoredCandidate[Document], options: QueryOptions) -> QueryResult:
        document = hit.item
        return QueryResult(
            id=document.id,
            text=document.text,
            metadata=copy.deepcopy(document.metadata) if options.include_metadata else None,
            score=hit.score,
            vector=list(document.embedding) if options.include_vectors else None,
        )

    async def delete(
        self,
        ids: Sequence[str],
        namespace: Optional[str] = None,
    ) -> BatchResult:
        namespace = self._resolve_namespace(namespace)
        ids = validate_ids(ids)
        if not ids:
            return BatchResult(count=0)

        try:
            async with self._lock.write():
                count = sum(1 for doc_id in ids if self._remove(namespace, doc_id))
                remaining = len(self._namespaces.get(namespace, {}))
        except Exception as e:
            self.logger.error("Failed to delete documents", namespace=namespace, error=str(e))
            raise DeleteError(
                f"Failed to delete documents: {e}", namespace=namespace, ids=ids, cause=e
            ) from e

        self.logger.debug(
            "Deleted documents", namespace=namespace, count=count, remaining=remaining
        )
        return BatchResult(count=count)

    def _remove(self, namespace: str, doc_id: str) -> bool:
        store = self._namespaces.get(namespace)
        if store is None:
            return False
        return store.pop(doc_id, None) is not None

    async def create_index(
        self,
        name: str,
        dimension: int,
        metric: Union[Metric, str] = Metric.COSINE,
    ) -> OperationStatus:
        name, dimension, metric = validate_index_args(name, dimension, metric)

        try:
            async with self._lock.write():
                existing = self.registry.get(name)
                store = self._namespaces.get(name, {})
                holds_vectors = any(doc.embedding is not None for doc in store.values())
                if (
                    existing is not None
                    and existing.dimension not in (None, dimension)
                    and holds_vectors
                ):
                    raise ValidationError(
                        f"Index '{name}' already holds {existing.dimension}-dimensional "
                        f"embeddings; cannot redeclare it with dimension {dimension}",
                        "dimension",
                    )
                spec = self.registry.register(name, dimension, metric)
                self._namespaces.setdefault(name, {})
        except DocStoreError:
            raise
        except Exception as e:
            self.logger.error("Failed to create index", namespace=name, error=str(e))
            raise CreateIndexError(
                f"Failed to create index: {e}", namespace=name, cause=e
            ) from e

        self.logger.info(
            "Index created", namespace=name, dimension=dimension, metric=metric.value
        )
        return OperationStatus.success(
            f"Index {name} created",
            dimension=dimension,
            metric=metric.value,
            created_at=spec.created_at.isoformat(),
        )

    async def list_indexes(self) -> List[str]:
        async with self._lock.read():
            names = list(self._namespaces)
            names.extend(name for name in self.registry.names() if name not in self._namespaces)
        return names

    async def describe_index(self, name: str) -> IndexDescriptor:
        try:
            async with self._lock.read():
                store = self._namespaces.get(name, {})
                spec = self.registry.get(name)
                dimension = spec.dimension if spec is not None else None
                if dimension is None:
                    dimension = next(
                        (len(doc.embedding) for doc in store.values() if doc.embedding is not None),
                        self.default_dimension,
                    )
                descriptor = IndexDescriptor(
                    dimension=dimension,
                    metric=spec.metric if spec is not None else Metric.COSINE,
                    count=len(store),
                )
        except Exception as e:
            self.logger.error("Failed to describe index", namespace=name, error=str(e))
            raise DescribeIndexError(
                f"Failed to describe index: {e}", namespace=name, cause=e
            ) from e

        self.logger.debug("Index described", namespace=name, count=descriptor.count)
        return descriptor

    async def delete_index(self, name: str) -> OperationStatus:
        try:
            async with self._lock.write():
                store = self._namespaces.pop(name, None)
                registered = self.registry.remove(name)
        except Exception as e:
            self.logger.error("Failed to delete index", namespace=name, error=str(e))
            raise DeleteIndexError(
                f"Failed to delete index: {e}", namespace=name, cause=e
            ) from e

        if store is None and not registered:
            return OperationStatus.not_found(f"Index {name} not found", namespace=name)

        deleted = len(store) if store is not None else 0
        self.logger.info("Index deleted", namespace=name, deleted_documents=deleted)
        return OperationStatus.success(
            f"Index {name} deleted", namespace=name, deleted_documents=deleted
        )

    async def update_by_id(
        self,
        name: str,
        id: str,
        vector: Optional[Sequence[float]] = None,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> OperationStatus:
        vector, metadata = self._validate_update(vector, metadata)

        async with self._lock.write():
            store = self._namespaces.get(name, {})
            document = store.get(id)
            if document is None:
                return OperationStatus.not_found(
                    f"Document {id} not found", namespace=name, id=id
                )

            changes: Dict[str, Any] = {}
            if vector is not None:
                self.registry.check_dimension(name, vector)
                self.registry.observe(name, len(vector))
                changes["embedding"] = vector
            if metadata is not None:
                changes["metadata"] = {**document.metadata, **metadata}
            store[id] = document.model_copy(update=changes, deep=True)

        self.logger.debug("Document updated", namespace=name, id=id, fields=sorted(changes))
        return OperationStatus.success(f"Document {id} updated", namespace=name, id=id)

    async def delete_by_id(self, name: str, id: str) -> OperationStatus:
        try:
            async with self._lock.write():
                deleted = self._remove(name, id)
        except Exception as e:
            self.logger.error("Failed to delete document", namespace=name, id=id, error=str(e))
            return OperationStatus.error(
                f"Failed to delete document {id}: {e}", namespace=name, id=id
            )

        self.logger.debug(
            "Document deleted" if deleted else "Document not found", namespace=name, id=id
        )
        if not deleted:
            return OperationStatus.not_found(f"Document {id} not found", namespace=name, id=id)
        return OperationStatus.success(f"Document {id} deleted", namespace=name, id=id)
