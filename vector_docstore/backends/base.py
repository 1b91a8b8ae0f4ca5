"""Abstract base class for vector store backends."""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any, ClassVar, Dict, FrozenSet, List, Optional, Tuple, Union

from ..config.logging import LoggerMixin
from ..core.exceptions import CapabilityError, Operation, ValidationError
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
from ..models.results import BatchResult, OperationStatus
from ..utils.validation import validate_metadata, validate_vector

DocumentInput = Union[Document, Mapping]

CORE_OPERATIONS: FrozenSet[Operation] = frozenset(
    {Operation.UPSERT, Operation.QUERY, Operation.DELETE}
)
ALL_OPERATIONS: FrozenSet[Operation] = frozenset(Operation)


class VectorBackend(ABC, LoggerMixin):
    """Uniform contract every store backend implements.

    upsert, query and delete are mandatory. Index management and single-item
    operations are optional: a backend lists the verbs it implements in
    ``capabilities`` and the defaults below raise CapabilityError.
    """

    capabilities: ClassVar[FrozenSet[Operation]] = CORE_OPERATIONS

    def __init__(
        self,
        namespace: str = DEFAULT_NAMESPACE,
        default_dimension: int = DEFAULT_DIMENSION,
        registry: Optional[IndexRegistry] = None,
        logger=None,
    ) -> None:
        self._logger = logger
        self.namespace = namespace
        self.default_dimension = default_dimension
        self.registry = registry if registry is not None else IndexRegistry(logger=logger)

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Identifier of this backend, used in logs and CapabilityError."""
        pass

    def supports(self, operation: Operation) -> bool:
        return operation in self.capabilities

    def unsupported_error(self, operation: Operation) -> CapabilityError:
        return CapabilityError(operation.value, self.provider_name)

    def _resolve_namespace(self, namespace: Optional[str]) -> str:
        return namespace or self.namespace

    def _validate_update(
        self,
        vector: Optional[Sequence[float]],
        metadata: Optional[Mapping[str, Any]],
    ) -> Tuple[Optional[List[float]], Optional[Dict[str, Any]]]:
        """Check update_by_id arguments; at least one field is required."""
        if vector is None and metadata is None:
            raise ValidationError(
                "Either vector or metadata must be provided for update", "update"
            )
        return (
            validate_vector(vector) if vector is not None else None,
            validate_metadata(metadata) if metadata is not None else None,
        )

    @abstractmethod
    async def initialize(self) -> None:
        """Acquire backend resources."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release backend resources."""
        pass

    @abstractmethod
    async def upsert(
        self,
        documents: Sequence[DocumentInput],
        namespace: Optional[str] = None,
    ) -> BatchResult:
        """Insert or fully replace documents."""
        pass

    @abstractmethod
    async def query(
        self,
        vector: Sequence[float],
        options: QueryOptions,
    ) -> List[QueryResult]:
        """Return the documents most similar to ``vector``."""
        pass

    @abstractmethod
    async def delete(
        self,
        ids: Sequence[str],
        namespace: Optional[str] = None,
    ) -> BatchResult:
        """Delete documents by id; absent ids are not errors."""
        pass

    async def create_index(
        self,
        name: str,
        dimension: int,
        metric: Union[Metric, str] = Metric.COSINE,
    ) -> OperationStatus:
        raise self.unsupported_error(Operation.CREATE_INDEX)

    async def list_indexes(self) -> List[str]:
        raise self.unsupported_error(Operation.LIST_INDEXES)

    async def describe_index(self, name: str) -> IndexDescriptor:
        raise self.unsupported_error(Operation.DESCRIBE_INDEX)

    async def delete_index(self, name: str) -> OperationStatus:
        raise self.unsupported_error(Operation.DELETE_INDEX)

    async def update_by_id(
        self,
        name: str,
        id: str,
        vector: Optional[Sequence[float]] = None,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> OperationStatus:
        raise self.unsupported_error(Operation.UPDATE_BY_ID)

    async def delete_by_id(self, name: str, id: str) -> OperationStatus:
        raise self.unsupported_error(Operation.DELETE_BY_ID)
