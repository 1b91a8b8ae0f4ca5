"""Async utility functions."""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Optional, TypeVar

from ..core.exceptions import Operation, operation_error_for

T = TypeVar('T')


async def run_with_timeout(
    coro: Awaitable[T],
    timeout_seconds: float,
    operation: Operation,
    namespace: Optional[str] = None,
) -> T:
    """Run a store call with a timeout, reporting expiry as the verb's OperationError."""
    try:
        return await asyncio.wait_for(coro, timeout=timeout_seconds)
    except asyncio.TimeoutError as e:
        error_cls = operation_error_for(operation)
        raise error_cls(
            f"{operation.value} timed out after {timeout_seconds}s",
            namespace=namespace,
            cause=e,
            timeout_seconds=timeout_seconds,
        ) from e


class ReadWriteLock:
    """Asyncio lock allowing many readers or a single writer.

    Waiting writers block new readers so a stream of queries cannot starve
    mutations.
    """

    def __init__(self) -> None:
        self._condition = asyncio.Condition()
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0

    @property
    def readers(self) -> int:
        return self._readers

    @property
    def writing(self) -> bool:
        return self._writer

    @asynccontextmanager
    async def read(self) -> AsyncIterator[None]:
        """Acquire shared access."""
        async with self._condition:
            await self._condition.wait_for(
                lambda: not self._writer and self._waiting_writers == 0
            )
            self._readers += 1
        try:
            yield
        finally:
            async with self._condition:
                self._readers -= 1
                if self._readers == 0:
                    self._condition.notify_all()

    @asynccontextmanager
    async def write(self) -> AsyncIterator[None]:
        """Acquire exclusive access."""
        async with self._condition:
            self._waiting_writers += 1
            try:
                await self._condition.wait_for(
                    lambda: not self._writer and self._readers == 0
                )
            finally:
                self._waiting_writers -= 1
                # Readers blocked behind a cancelled writer must re-check
                self._condition.notify_all()
            self._writer = True
        try:
            yield
        finally:
            async with self._condition:
                self._writer = False
                self._condition.notify_all()
