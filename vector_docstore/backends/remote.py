"""Backend adapter over a remote vector database."""

import json
from collections.abc import Mapping, Sequence
from typing import Any, Dict, List, Optional, Set, Union

import numpy as np

from ..core.exceptions import (
    DocStoreError,
    InitializationError,
    Operation,
    QueryError,
    UpdateError,
    UpsertError,
    ValidationError,
)
from ..core.registry import IndexRegistry
from ..models.config import RemoteStoreOptions
from ..models.documents import (
    DEFAULT_NAMESPACE,
    IndexDescriptor,
    Metric,
    QueryOptions,
    QueryResult,
)
from ..models.results import BatchResult, ItemFailure, OperationStatus, StatusCode
from ..utils.async_utils import run_with_timeout
from ..utils.validation import (
    validate_documents,
    validate_ids,
    validate_index_args,
    validate_model,
    validate_vector,
)
from .base import ALL_OPERATIONS, DocumentInput, VectorBackend
from .client import RemoteVectorClient

TEXT_KEY = "text"


def build_filter_expression(filter: Any) -> Optional[str]:
    """Translate a query filter into the remote filter syntax.

    Strings pass through untouched; a mapping becomes an AND of equality
    clauses.
    """
    if filter is None or filter == "":
        return None
    if isinstance(filter, str):
        return filter
    if isinstance(filter, Mapping):
        clauses = []
        for key, value in filter.items():
            if isinstance(value, bool):
                literal = "true" if value else "false"
            elif isinstance(value, (int, float)):
                literal = repr(value)
            elif isinstance(value, str):
                literal = "'" + value.replace("'", "\\'") + "'"
            else:
                raise ValidationError(
                    f"Unsupported filter value for {key!r}: {json.dumps(value, default=str)}",
                    "filter",
                )
            clauses.append(f"{key} = {literal}")
        return " AND ".join(clauses) or None
    raise ValidationError(
        f"Unsupported filter for the remote backend: {type(filter).__name__} "
        "(expected a string or a mapping)",
        "filter",
    )


class RemoteBackendAdapter(VectorBackend):
    """Vector backend forwarding every verb to a RemoteVectorClient.

    The remote service has no index-management primitives, so create_index
    only records the declaration, describe_index approximates with a probe
    query and delete_index is a no-op.
    """

    capabilities = ALL_OPERATIONS

    def __init__(
        self,
        options: Union[RemoteStoreOptions, Mapping],
        registry: Optional[IndexRegistry] = None,
        logger=None,
        client: Optional[RemoteVectorClient] = None,
    ) -> None:
        try:
            options = validate_model(RemoteStoreOptions, options, "remote store options")
        except ValidationError as e:
            raise InitializationError(
                f"Remote vector store misconfigured: {e.message}",
                provider="remote",
                cause=e,
            ) from e

        super().__init__(options.namespace, options.default_dimension, registry, logger)
        self.options = options

        if client is None:
            try:
                client = RemoteVectorClient(
                    options.url,
                    options.token,
                    timeout_seconds=options.timeout_seconds,
                    logger=logger,
                )
            except Exception as e:
                raise InitializationError(
                    f"Failed to create remote vector client: {e}",
                    provider="remote",
                    cause=e,
                ) from e
        self.client = client
        self._seen_namespaces: Set[str] = {DEFAULT_NAMESPACE, options.namespace}

    @property
    def provider_name(self) -> str:
        return "remote"

    async def initialize(self) -> None:
        await self.client.initialize()
        self.logger.info(
            "Remote vector store initialized",
            url=self.options.url,
            namespace=self.namespace,
        )

    async def close(self) -> None:
        await self.client.close()
        self.logger.info("Remote vector store closed")

    async def _call(self, coro, operation: Operation, namespace: Optional[str] = None):
        # The aiohttp timeout bounds each request; this bounds the whole call.
        return await run_with_timeout(
            coro, self.options.timeout_seconds, operation, namespace=namespace
        )

    async def upsert(
        self,
        documents: Sequence[DocumentInput],
        namespace: Optional[str] = None,
    ) -> BatchResult:
        namespace = self._resolve_namespace(namespace)
        valid, failures = validate_documents(documents)

        accepted = []
        for document in valid:
            try:
                if document.embedding is None:
                    raise ValidationError(
                        f"Document {document.id} has no embedding; the remote service "
                        "cannot store it",
                        "embedding",
                    )
                self.registry.check_dimension(namespace, document.embedding, declared_only=True)
            except ValidationError as e:
                self.logger.warning(
                    "Document rejected", namespace=namespace, id=document.id, error=e.message
                )
                failures.append(
                    ItemFailure(id=document.id, message=e.message, error_code=e.error_code)
                )
                continue
            accepted.append(document)

        if not accepted:
            return BatchResult(count=0, failures=failures)

        ids = [document.id for document in accepted]
        vectors = [list(document.embedding) for document in accepted]
        metadata = [{**document.metadata, TEXT_KEY: document.text} for document in accepted]

        try:
            await self._call(
                self.client.upsert(namespace, ids, vectors, metadata),
                Operation.UPSERT,
                namespace,
            )
        except DocStoreError:
            raise
        except Exception as e:
            self.logger.error(
                "Failed to upsert documents", namespace=namespace, count=len(ids), error=str(e)
            )
            raise UpsertError(
                f"Failed to upsert documents: {e}", namespace=namespace, ids=ids, cause=e
            ) from e

        self._seen_namespaces.add(namespace)
        self.logger.debug("Upserted documents", namespace=namespace, count=len(ids))
        return BatchResult(count=len(ids), failures=failures)

    async def query(
        self,
        vector: Sequence[float],
        options: QueryOptions,
    ) -> List[QueryResult]:
        namespace = self._resolve_namespace(options.namespace)
        query_vector = validate_vector(vector)
        expression = build_filter_expression(options.filter)

        try:
            hits = await self._call(
                self.client.query(
                    namespace,
                    query_vector,
                    options.top_k,
                    filter=expression,
                    include_vectors=options.include_vectors,
                ),
                Operation.QUERY,
                namespace,
            )
            results = [self._to_result(hit, options) for hit in hits]
        except DocStoreError:
            raise
        except Exception as e:
            self.logger.error("Failed to query documents", namespace=namespace, error=str(e))
            raise QueryError(f"Failed to query documents: {e}", namespace=namespace, cause=e) from e

        self.logger.debug(
            "Query completed", namespace=namespace, top_k=options.top_k, results=len(results)
        )
        return results

    @staticmethod
    def _to_result(hit: Dict[str, Any], options: QueryOptions) -> QueryResult:
        metadata = dict(hit.get("metadata") or {})
        text = metadata.get(TEXT_KEY)
        return QueryResult(
            id=str(hit["id"]),
            text=text if isinstance(text, str) else "",
            metadata=metadata if options.include_metadata else None,
            score=float(hit.get("score", 0.0)),
            vector=hit.get("vector") if options.include_vectors else None,
        )

    async def delete(
        self,
        ids: Sequence[str],
        namespace: Optional[str] = None,
    ) -> BatchResult:
        namespace = self._resolve_namespace(namespace)
        ids = validate_ids(ids)

        count = 0
        failures: List[ItemFailure] = []
        for doc_id in ids:
            status = await self.delete_by_id(namespace, doc_id)
            if status.ok:
                count += 1
            elif status.status == StatusCode.ERROR:
                failures.append(
                    ItemFailure(id=doc_id, message=status.message, error_code="delete_failed")
                )

        self.logger.debug(
            "Deleted documents", namespace=namespace, count=count, failed=len(failures)
        )
        return BatchResult(count=count, failures=failures)

    async def create_index(
        self,
        name: str,
        dimension: int,
        metric: Union[Metric, str] = Metric.COSINE,
    ) -> OperationStatus:
        name, dimension, metric = validate_index_args(name, dimension, metric)
        spec = self.registry.register(name, dimension, metric)
        self._seen_namespaces.add(name)

        # Namespaces are created implicitly by the first upsert.
        self.logger.info(
            "Index declared", namespace=name, dimension=dimension, metric=metric.value
        )
        return OperationStatus.success(
            f"Index {name} created",
            dimension=dimension,
            metric=metric.value,
            created_at=spec.created_at.isoformat(),
        )

    async def list_indexes(self) -> List[str]:
        names = [DEFAULT_NAMESPACE]
        names.extend(sorted(self._seen_namespaces - {DEFAULT_NAMESPACE}))
        return names

    async def describe_index(self, name: str) -> IndexDescriptor:
        spec = self.registry.get(name)
        dimension = spec.dimension if spec is not None and spec.dimension else self.default_dimension
        metric = spec.metric if spec is not None else Metric.COSINE
        count = 0

        probe = np.random.default_rng().random(dimension).tolist()
        try:
            hits = await self._call(
                self.client.query(name, probe, 1, include_vectors=True),
                Operation.DESCRIBE_INDEX,
                name,
            )
        except Exception as e:
            self.logger.warning(
                "Index probe failed, returning defaults", namespace=name, error=str(e)
            )
            hits = []

        if hits:
            # Exact counts are not available; -1 means "holds at least one vector".
            count = -1
            vector = hits[0].get("vector")
            if vector:
                dimension = len(vector)

        self.logger.debug("Index described", namespace=name, dimension=dimension, count=count)
        return IndexDescriptor(dimension=dimension, metric=metric, count=count)

    async def delete_index(self, name: str) -> OperationStatus:
        self.logger.warning(
            "Index deletion is not supported by the remote service; nothing was deleted",
            namespace=name,
        )
        return OperationStatus.success(f"Index {name} deletion acknowledged", noop=True)

    async def update_by_id(
        self,
        name: str,
        id: str,
        vector: Optional[Sequence[float]] = None,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> OperationStatus:
        vector, metadata = self._validate_update(vector, metadata)
        self.registry.check_dimension(name, vector, declared_only=True)

        try:
            updated = await self._call(
                self.client.update_by_id(name, id, vector=vector, metadata=metadata),
                Operation.UPDATE_BY_ID,
                name,
            )
        except DocStoreError:
            raise
        except Exception as e:
            self.logger.error("Failed to update document", namespace=name, id=id, error=str(e))
            raise UpdateError(
                f"Failed to update document {id}: {e}", namespace=name, ids=[id], cause=e
            ) from e

        if not updated:
            return OperationStatus.not_found(f"Document {id} not found", namespace=name, id=id)
        self.logger.debug("Document updated", namespace=name, id=id)
        return OperationStatus.success(f"Document {id} updated", namespace=name, id=id)

    async def delete_by_id(self, name: str, id: str) -> OperationStatus:
        try:
            deleted = await self._call(
                self.client.delete_by_id(name, id), Operation.DELETE_BY_ID, name
            )
        except Exception as e:
            self.logger.error("Failed to delete document", namespace=name, id=id, error=str(e))
            return OperationStatus.error(
                f"Failed to delete document {id}: {e}", namespace=name, id=id
            )

        if not deleted:
            return OperationStatus.not_found(f"Document {id} not found", namespace=name, id=id)
        self.logger.debug("Document deleted", namespace=name, id=id)
        return OperationStatus.success(f"Document {id} deleted", namespace=name, id=id)
