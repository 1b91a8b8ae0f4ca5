"""Document, query and index models for vector-docstore."""

from enum import Enum
from typing import Annotated, Any, Dict, List, Optional

from pydantic import Field, JsonValue, StrictInt, field_validator

from .base import DocStoreBaseModel, TimestampedModel

DEFAULT_NAMESPACE = "default"
DEFAULT_DIMENSION = 384
DEFAULT_TOP_K = 5

# Finite float, rejecting NaN and infinities
VectorComponent = Annotated[float, Field(allow_inf_nan=False)]
Vector = List[VectorComponent]
Metadata = Dict[str, JsonValue]


class Metric(str, Enum):
    """Similarity/distance function an index is declared to use."""

    COSINE = "cosine"
    EUCLIDEAN = "euclidean"
    DOTPRODUCT = "dotproduct"


class Document(DocStoreBaseModel):
    """An embedded document held by a store."""

    id: str = Field(min_length=1, description="Identifier, unique within a namespace")
    text: str = Field(default="", description="Text payload")
    metadata: Metadata = Field(
        default_factory=dict,
        description="Document metadata and attributes"
    )
    embedding: Optional[Vector] = Field(
        default=None,
        min_length=1,
        description="Embedding vector; documents without one are never ranked"
    )


class QueryResult(DocStoreBaseModel):
    """A single ranked hit returned by a similarity query."""

    id: str = Field(description="Identifier of the matching document")
    text: str = Field(default="", description="Text of the matching document")
    metadata: Optional[Metadata] = Field(
        default=None,
        description="Document metadata (omitted unless requested)"
    )
    score: float = Field(description="Similarity score, in [-1, 1] for cosine")
    vector: Optional[List[float]] = Field(
        default=None,
        description="Echoed embedding (only when explicitly requested)"
    )


class QueryOptions(DocStoreBaseModel):
    """Options recognised by a similarity query."""

    top_k: StrictInt = Field(
        default=DEFAULT_TOP_K,
        gt=0,
        alias="topK",
        description="Maximum number of ranked results"
    )
    include_metadata: bool = Field(
        default=True,
        alias="includeMetadata",
        description="Whether to return document metadata"
    )
    include_vectors: bool = Field(
        default=False,
        alias="includeVectors",
        description="Whether to echo stored embeddings"
    )
    filter: Optional[Any] = Field(
        default=None,
        description="Backend-specific metadata predicate"
    )
    namespace: Optional[str] = Field(
        default=None,
        min_length=1,
        description="Namespace override for this call only"
    )


class IndexDescriptor(DocStoreBaseModel):
    """Describes a namespace: dimension, metric and document count."""

    dimension: int = Field(ge=1, description="Embedding vector dimension")
    metric: Metric = Field(default=Metric.COSINE, description="Declared metric")
    count: int = Field(
        ge=-1,
        description="Document count; -1 means nonzero but exact count unknown"
    )


class IndexSpec(TimestampedModel):
    """Registry entry for a namespace."""

    name: str = Field(min_length=1, description="Namespace name")
    dimension: Optional[int] = Field(
        default=None,
        ge=1,
        description="Declared or inferred embedding dimension"
    )
    metric: Metric = Field(default=Metric.COSINE, description="Declared metric")
    declared: bool = Field(
        default=False,
        description="True when registered through create_index"
    )

    @field_validator('name')
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError('Index name cannot be blank')
        return v
