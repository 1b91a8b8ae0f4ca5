"""Test utilities and helper functions for vector-docstore tests."""

from typing import Any, Dict, List, Optional, Sequence

from vector_docstore.models.documents import QueryResult
from vector_docstore.models.results import OperationStatus, StatusCode


class DocumentTestHelper:
    """Helper class for building test documents."""

    @staticmethod
    def create_document(
        doc_id: str = "doc",
        embedding: Optional[Sequence[float]] = None,
        text: Optional[str] = None,
        **metadata: Any,
    ) -> Dict[str, Any]:
        """Create a document mapping; metadata comes from keyword arguments."""
        document: Dict[str, Any] = {
            "id": doc_id,
            "text": text if text is not None else f"Text of {doc_id}",
            "metadata": metadata,
        }
        if embedding is not None:
            document["embedding"] = list(embedding)
        return document

    @staticmethod
    def create_batch(count: int = 5, dimension: int = 3, prefix: str = "doc") -> List[Dict[str, Any]]:
        """Create ``count`` documents with distinct one-hot-ish embeddings."""
        documents = []
        for i in range(count):
            embedding = [0.0] * dimension
            embedding[i % dimension] = 1.0
            embedding[(i + 1) % dimension] += 0.1 * (i + 1)
            documents.append(
                DocumentTestHelper.create_document(f"{prefix}_{i}", embedding, index=i)
            )
        return documents


class AssertionHelpers:
    """Custom assertions for store results."""

    @staticmethod
    def assert_sorted_by_score(results: List[QueryResult]) -> None:
        scores = [result.score for result in results]
        assert scores == sorted(scores, reverse=True), f"Scores not descending: {scores}"

    @staticmethod
    def assert_status(status: OperationStatus, expected: StatusCode) -> None:
        assert status.status == expected, f"Expected {expected.value}, got {status.status}: {status.message}"

    @staticmethod
    def ids(results: List[QueryResult]) -> List[str]:
        return [result.id for result in results]
