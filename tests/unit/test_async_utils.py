"""Tests for async helpers."""

import asyncio

import pytest

from vector_docstore.core.exceptions import DescribeIndexError, Operation, QueryError
from vector_docstore.utils.async_utils import ReadWriteLock, run_with_timeout


class TestRunWithTimeout:
    """Test timeout conversion."""

    async def test_returns_result(self):
        async def work():
            return 42

        assert await run_with_timeout(work(), 1.0, Operation.QUERY) == 42

    async def test_timeout_becomes_operation_error(self):
        with pytest.raises(QueryError) as exc_info:
            await run_with_timeout(asyncio.sleep(1), 0.01, Operation.QUERY, namespace="ns")

        error = exc_info.value
        assert error.details["namespace"] == "ns"
        assert error.details["timeout_seconds"] == 0.01
        assert isinstance(error.cause, asyncio.TimeoutError)

    async def test_timeout_error_class_follows_operation(self):
        with pytest.raises(DescribeIndexError):
            await run_with_timeout(asyncio.sleep(1), 0.01, Operation.DESCRIBE_INDEX)

    async def test_other_exceptions_propagate(self):
        async def fail():
            raise KeyError("x")

        with pytest.raises(KeyError):
            await run_with_timeout(fail(), 1.0, Operation.QUERY)


class TestReadWriteLock:
    """Test the reader/writer lock."""

    async def test_readers_share(self):
        lock = ReadWriteLock()

        async with lock.read():
            async with lock.read():
                assert lock.readers == 2
        assert lock.readers == 0

    async def test_writer_excludes_readers(self):
        lock = ReadWriteLock()
        events = []

        async def writer():
            async with lock.write():
                events.append("write-start")
                await asyncio.sleep(0.01)
                events.append("write-end")

        async def reader():
            await asyncio.sleep(0)
            async with lock.read():
                events.append("read")

        await asyncio.gather(writer(), reader())

        assert events == ["write-start", "write-end", "read"]

    async def test_waiting_writer_blocks_new_readers(self):
        lock = ReadWriteLock()
        events = []
        first_reader_in = asyncio.Event()

        async def first_reader():
            async with lock.read():
                first_reader_in.set()
                await asyncio.sleep(0.02)
                events.append("reader-1")

        async def writer():
            await first_reader_in.wait()
            async with lock.write():
                events.append("writer")

        async def late_reader():
            await first_reader_in.wait()
            await asyncio.sleep(0.005)
            async with lock.read():
                events.append("reader-2")

        await asyncio.gather(first_reader(), writer(), late_reader())

        assert events == ["reader-1", "writer", "reader-2"]

    async def test_lock_released_on_error(self):
        lock = ReadWriteLock()

        with pytest.raises(RuntimeError):
            async with lock.write():
                raise RuntimeError("boom")

        assert not lock.writing
        async with lock.read():
            assert lock.readers == 1
