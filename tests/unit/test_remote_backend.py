"""Tests for the remote backend adapter."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from vector_docstore.backends.client import RemoteRequestError
from vector_docstore.backends.remote import RemoteBackendAdapter, build_filter_expression
from vector_docstore.core.exceptions import (
    InitializationError,
    QueryError,
    UpdateError,
    UpsertError,
    ValidationError,
)
from vector_docstore.models.documents import QueryOptions
from vector_docstore.models.results import StatusCode
from tests.utils import AssertionHelpers, DocumentTestHelper


class TestConstruction:
    """Test adapter construction."""

    def test_missing_token_fails_fast(self, remote_options):
        del remote_options["token"]

        with pytest.raises(InitializationError) as exc_info:
            RemoteBackendAdapter(remote_options)
        assert exc_info.value.details["provider"] == "remote"

    def test_bad_url_fails_fast(self, remote_options):
        remote_options["url"] = "ftp://nope"

        with pytest.raises(InitializationError):
            RemoteBackendAdapter(remote_options)

    def test_builds_client_from_options(self, remote_options):
        backend = RemoteBackendAdapter(remote_options)

        assert backend.provider_name == "remote"
        assert backend.client.url == "https://vector.example.test"
        assert backend.client.timeout_seconds == 5.0

    async def test_lifecycle_delegates(self, remote_backend, mock_client):
        await remote_backend.initialize()
        await remote_backend.close()

        mock_client.initialize.assert_awaited_once()
        mock_client.close.assert_awaited_once()


class TestUpsert:
    """Test upserts over the wire."""

    async def test_sends_parallel_columns(self, remote_backend, mock_client):
        result = await remote_backend.upsert(
            [
                DocumentTestHelper.create_document("a", [1.0, 0.0], text="alpha", lang="en"),
                {"id": "b", "text": "beta", "embedding": [0.0, 1.0]},
            ],
            namespace="docs",
        )

        assert result.count == 2
        mock_client.upsert.assert_awaited_once_with(
            "docs",
            ["a", "b"],
            [[1.0, 0.0], [0.0, 1.0]],
            [{"lang": "en", "text": "alpha"}, {"text": "beta"}],
        )

    async def test_document_without_embedding_reported(self, remote_backend, mock_client):
        result = await remote_backend.upsert(
            [{"id": "a", "text": "alpha"}, DocumentTestHelper.create_document("b", [1.0, 2.0])]
        )

        assert result.count == 1
        assert result.failed_ids == ["a"]
        assert result.failures[0].error_code == "VALIDATION_ERROR"
        mock_client.upsert.assert_awaited_once_with(
            "default", ["b"], [[1.0, 2.0]], [{"text": "Text of b"}]
        )

    async def test_batch_without_embeddings_not_sent(self, remote_backend, mock_client):
        result = await remote_backend.upsert([{"id": "a"}])

        assert result.count == 0
        assert result.failed_ids == ["a"]
        mock_client.upsert.assert_not_awaited()

    async def test_invalid_documents_collected(self, remote_backend, mock_client):
        result = await remote_backend.upsert([{"id": "a", "embedding": [1.0]}, {"text": "no id"}])

        assert result.count == 1
        assert result.failed_ids == ["#1"]

    async def test_declared_dimension_enforced(self, remote_backend, mock_client):
        await remote_backend.create_index("docs", 3)

        result = await remote_backend.upsert(
            [DocumentTestHelper.create_document("a", [1.0, 0.0])], namespace="docs"
        )

        assert result.count == 0
        assert result.failed_ids == ["a"]
        mock_client.upsert.assert_not_awaited()

    async def test_inferred_dimension_not_enforced(self, remote_backend, mock_client):
        await remote_backend.upsert([DocumentTestHelper.create_document("a", [1.0, 0.0])])
        result = await remote_backend.upsert([DocumentTestHelper.create_document("b", [1.0, 0.0, 0.0])])

        assert result.count == 1

    async def test_transport_failure_raises_upsert_error(self, remote_backend, mock_client):
        mock_client.upsert.side_effect = RemoteRequestError("503 unavailable", status=503)

        with pytest.raises(UpsertError) as exc_info:
            await remote_backend.upsert([DocumentTestHelper.create_document("a", [1.0])])

        error = exc_info.value
        assert error.error_code == "upsert_failed"
        assert error.details["ids"] == ["a"]
        assert isinstance(error.cause, RemoteRequestError)

    async def test_timeout_raises_upsert_error(self, remote_options, mock_client):
        remote_options["timeout_seconds"] = 0.01
        backend = RemoteBackendAdapter(remote_options, client=mock_client)

        async def slow_upsert(*args, **kwargs):
            await asyncio.sleep(1)

        mock_client.upsert.side_effect = slow_upsert

        with pytest.raises(UpsertError) as exc_info:
            await backend.upsert([DocumentTestHelper.create_document("a", [1.0])])
        assert exc_info.value.details["timeout_seconds"] == 0.01


class TestQuery:
    """Test queries over the wire."""

    async def test_reshapes_hits(self, remote_backend, mock_client):
        mock_client.query.return_value = [
            {"id": "1", "score": 0.9, "metadata": {"text": "alpha", "lang": "en"}},
            {"id": "2", "score": 0.4, "metadata": None},
        ]

        results = await remote_backend.query([1.0, 0.0], QueryOptions(top_k=2))

        mock_client.query.assert_awaited_once_with(
            "default", [1.0, 0.0], 2, filter=None, include_vectors=False
        )
        assert AssertionHelpers.ids(results) == ["1", "2"]
        assert results[0].text == "alpha"
        assert results[0].metadata == {"text": "alpha", "lang": "en"}
        assert results[1].text == ""
        assert results[1].vector is None

    async def test_metadata_dropped_when_not_requested(self, remote_backend, mock_client):
        mock_client.query.return_value = [
            {"id": "1", "score": 0.9, "metadata": {"text": "alpha"}, "vector": [1.0, 0.0]}
        ]

        results = await remote_backend.query(
            [1.0, 0.0], QueryOptions(include_metadata=False, include_vectors=True)
        )

        assert results[0].metadata is None
        assert results[0].text == "alpha"
        assert results[0].vector == [1.0, 0.0]

    async def test_filter_passed_as_expression(self, remote_backend, mock_client):
        await remote_backend.query([1.0], QueryOptions(filter={"lang": "en"}, namespace="docs"))

        mock_client.query.assert_awaited_once_with(
            "docs", [1.0], 5, filter="lang = 'en'", include_vectors=False
        )

    async def test_failure_raises_query_error(self, remote_backend, mock_client):
        mock_client.query.side_effect = RemoteRequestError("boom")

        with pytest.raises(QueryError):
            await remote_backend.query([1.0], QueryOptions())


class TestBuildFilterExpression:
    """Test filter translation."""

    def test_string_passthrough(self):
        assert build_filter_expression("a > 1") == "a > 1"

    def test_mapping(self):
        expression = build_filter_expression({"lang": "en", "draft": False, "year": 2024})
        assert expression == "lang = 'en' AND draft = false AND year = 2024"

    def test_quotes_escaped(self):
        assert build_filter_expression({"name": "O'Brien"}) == "name = 'O\\'Brien'"

    def test_nested_values_rejected(self):
        with pytest.raises(ValidationError):
            build_filter_expression({"tags": ["a"]})

    def test_callable_rejected(self):
        with pytest.raises(ValidationError):
            build_filter_expression(lambda metadata: True)


class TestIndexes:
    """Test index management approximations."""

    async def test_describe_index_with_hits(self, remote_backend, mock_client):
        mock_client.query.return_value = [{"id": "1", "score": 0.1, "vector": [0.1, 0.2, 0.3]}]

        descriptor = await remote_backend.describe_index("docs")

        assert descriptor.count == -1
        assert descriptor.dimension == 3
        namespace, probe, top_k = mock_client.query.await_args.args
        assert namespace == "docs"
        assert len(probe) == 4
        assert top_k == 1
        assert mock_client.query.await_args.kwargs["include_vectors"] is True

    async def test_describe_index_empty(self, remote_backend, mock_client):
        descriptor = await remote_backend.describe_index("docs")

        assert descriptor.count == 0
        assert descriptor.dimension == 4

    async def test_describe_index_uses_declared_dimension(self, remote_backend, mock_client):
        await remote_backend.create_index("docs", 8)

        await remote_backend.describe_index("docs")

        _, probe, _ = mock_client.query.await_args.args
        assert len(probe) == 8

    async def test_describe_index_probe_failure_returns_defaults(self, remote_backend, mock_client):
        mock_client.query.side_effect = RemoteRequestError("down")

        descriptor = await remote_backend.describe_index("docs")

        assert descriptor.count == 0
        assert descriptor.dimension == 4

    async def test_delete_index_is_noop(self, remote_backend, mock_client):
        status = await remote_backend.delete_index("docs")

        assert status.ok
        assert status.details == {"noop": True}
        mock_client.delete_by_id.assert_not_awaited()

    async def test_list_indexes(self, remote_backend, mock_client):
        await remote_backend.create_index("zeta", 3)
        await remote_backend.upsert([{"id": "a"}], namespace="alpha")

        assert await remote_backend.list_indexes() == ["default", "alpha", "zeta"]


class TestSingleItemOperations:
    """Test update_by_id, delete_by_id and batch delete."""

    async def test_update_by_id(self, remote_backend, mock_client):
        status = await remote_backend.update_by_id("docs", "a", metadata={"lang": "fr"})

        assert status.ok
        mock_client.update_by_id.assert_awaited_once_with(
            "docs", "a", vector=None, metadata={"lang": "fr"}
        )

    async def test_update_missing_document(self, remote_backend, mock_client):
        mock_client.update_by_id.return_value = 0

        status = await remote_backend.update_by_id("docs", "a", vector=[1.0])

        AssertionHelpers.assert_status(status, StatusCode.NOT_FOUND)

    async def test_update_requires_a_field(self, remote_backend, mock_client):
        with pytest.raises(ValidationError):
            await remote_backend.update_by_id("docs", "a")
        mock_client.update_by_id.assert_not_awaited()

    async def test_update_transport_failure(self, remote_backend, mock_client):
        mock_client.update_by_id.side_effect = RemoteRequestError("down")

        with pytest.raises(UpdateError) as exc_info:
            await remote_backend.update_by_id("docs", "a", vector=[1.0])
        assert exc_info.value.error_code == "update_vector_failed"

    async def test_delete_by_id_statuses(self, remote_backend, mock_client):
        mock_client.delete_by_id.side_effect = [1, 0, RemoteRequestError("down")]

        deleted = await remote_backend.delete_by_id("docs", "a")
        missing = await remote_backend.delete_by_id("docs", "b")
        failed = await remote_backend.delete_by_id("docs", "c")

        AssertionHelpers.assert_status(deleted, StatusCode.SUCCESS)
        AssertionHelpers.assert_status(missing, StatusCode.NOT_FOUND)
        AssertionHelpers.assert_status(failed, StatusCode.ERROR)
        assert "down" in failed.message

    async def test_delete_collects_failures(self, remote_backend, mock_client):
        mock_client.delete_by_id.side_effect = [1, 0, RemoteRequestError("down")]

        result = await remote_backend.delete(["a", "b", "c"], namespace="docs")

        assert result.count == 1
        assert result.failed_ids == ["c"]
        assert mock_client.delete_by_id.await_count == 3
