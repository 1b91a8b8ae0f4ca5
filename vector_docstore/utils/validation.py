"""Validation helpers applied at the store boundary.

Every helper turns pydantic failures into the library's ValidationError so
callers only ever see the store's own error taxonomy.
"""

from collections.abc import Mapping, Sequence
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar, Union

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..core.exceptions import ValidationError
from ..models.config import StoreConfig
from ..models.documents import Document, Metadata, Metric, QueryOptions, Vector
from ..models.results import ItemFailure

ModelType = TypeVar('ModelType', bound=BaseModel)

_vector_adapter = TypeAdapter(Vector)


def _describe(exc: PydanticValidationError) -> Tuple[str, Optional[str]]:
    """Summarise a pydantic error as (message, first offending field)."""
    errors = exc.errors()
    if not errors:
        return str(exc), None
    parts = []
    for error in errors:
        loc = ".".join(str(p) for p in error.get("loc", ()))
        parts.append(f"{loc}: {error.get('msg')}" if loc else str(error.get("msg")))
    first_loc = errors[0].get("loc") or ()
    field = str(first_loc[0]) if first_loc else None
    return "; ".join(parts), field


def validate_model(model_cls: Type[ModelType], value: Any, what: str) -> ModelType:
    """Validate a mapping (or model instance) against a pydantic model."""
    if isinstance(value, model_cls):
        return value
    if isinstance(value, BaseModel):
        value = value.model_dump()
    if not isinstance(value, Mapping):
        raise ValidationError(f"Invalid {what}: expected a mapping, got {type(value).__name__}")
    try:
        return model_cls.model_validate(dict(value))
    except PydanticValidationError as e:
        message, field = _describe(e)
        raise ValidationError(f"Invalid {what}: {message}", field, cause=e) from e


def validate_store_config(config: Any) -> StoreConfig:
    """Validate the configuration value a store is constructed from."""
    if config is None:
        raise ValidationError("Vector store configuration is required", "provider")
    return validate_model(StoreConfig, config, "vector store configuration")


def validate_document(document: Union[Document, Mapping]) -> Document:
    """Validate a single document."""
    return validate_model(Document, document, "document")


def validate_documents(
    documents: Sequence[Union[Document, Mapping]],
) -> Tuple[List[Document], List[ItemFailure]]:
    """Split a batch into valid documents and per-document failures."""
    if isinstance(documents, (str, bytes)) or not isinstance(documents, Sequence):
        raise ValidationError("documents must be a list", "documents")

    valid: List[Document] = []
    failures: List[ItemFailure] = []
    for position, item in enumerate(documents):
        try:
            valid.append(validate_document(item))
        except ValidationError as e:
            failures.append(
                ItemFailure(
                    id=_item_id(item, position),
                    message=e.message,
                    error_code=e.error_code,
                )
            )
    return valid, failures


def _item_id(item: Any, position: int) -> str:
    raw = getattr(item, "id", None)
    if raw is None and isinstance(item, Mapping):
        raw = item.get("id")
    return str(raw) if raw not in (None, "") else f"#{position}"


def validate_vector(vector: Any, field: str = "vector") -> List[float]:
    """Validate a query or update vector: non-empty, finite numbers."""
    if isinstance(vector, (str, bytes)):
        raise ValidationError(f"{field} must be a sequence of numbers", field)
    try:
        values = _vector_adapter.validate_python(list(vector))
    except TypeError as e:
        raise ValidationError(f"{field} must be a sequence of numbers", field, cause=e) from e
    except PydanticValidationError as e:
        message, _ = _describe(e)
        raise ValidationError(f"Invalid {field}: {message}", field, cause=e) from e
    if not values:
        raise ValidationError(f"{field} cannot be empty", field)
    return values


def validate_ids(ids: Any) -> List[str]:
    """Validate a list of document ids."""
    if isinstance(ids, (str, bytes)) or not isinstance(ids, Sequence):
        raise ValidationError("ids must be a list of strings", "ids")
    for doc_id in ids:
        if not isinstance(doc_id, str) or not doc_id:
            raise ValidationError(f"Invalid document id: {doc_id!r}", "ids")
    return list(ids)


def validate_query_options(options: Union[QueryOptions, Mapping, None]) -> QueryOptions:
    """Validate query options given as a model, a mapping or None."""
    if options is None:
        return QueryOptions()
    return validate_model(QueryOptions, options, "query options")


_metadata_adapter = TypeAdapter(Metadata)


def validate_metadata(metadata: Any, field: str = "metadata") -> Dict[str, Any]:
    """Validate a metadata map: string keys, JSON-compatible values."""
    if not isinstance(metadata, Mapping):
        raise ValidationError(f"{field} must be a mapping", field)
    try:
        return _metadata_adapter.validate_python(dict(metadata))
    except PydanticValidationError as e:
        message, _ = _describe(e)
        raise ValidationError(f"Invalid {field}: {message}", field, cause=e) from e


def validate_index_args(
    name: Any,
    dimension: Any,
    metric: Union[Metric, str] = Metric.COSINE,
) -> Tuple[str, int, Metric]:
    """Validate create_index arguments."""
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Index name cannot be empty", "name")
    if isinstance(dimension, bool) or not isinstance(dimension, int) or dimension < 1:
        raise ValidationError(
            f"Index dimension must be a positive integer, got {dimension!r}",
            "dimension",
        )
    try:
        metric = Metric(metric)
    except ValueError as e:
        raise ValidationError(
            f"Unsupported metric {metric!r} "
            f"(expected one of: {', '.join(m.value for m in Metric)})",
            "metric",
            cause=e,
        ) from e
    return name, dimension, metric
