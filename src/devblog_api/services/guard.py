"""Bounded, time-limited execution of data store calls."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import structlog
from sqlalchemy.exc import SQLAlchemyError

from devblog_api.config.gate import GateSettings
from devblog_api.exceptions import DataStoreError, DataStoreTimeoutError


logger = structlog.get_logger(__name__)

T = TypeVar("T")


class DataStoreGuard:
    """Caps in-flight data store calls and gives each one a time budget.

    Waiting for a slot counts against the budget, so a saturated store turns
    into 503s instead of an unbounded queue of requests.
    """

    def __init__(self, max_concurrency: int = 64, timeout: float = 10.0) -> None:
        self.max_concurrency = max_concurrency
        self.timeout = timeout
        self._semaphore = asyncio.Semaphore(max_concurrency)

    @classmethod
    def from_settings(cls, settings: GateSettings) -> "DataStoreGuard":
        return cls(
            max_concurrency=settings.max_concurrency,
            timeout=settings.query_timeout_seconds,
        )

    async def run(self, operation: Callable[[], Awaitable[T]], *, name: str) -> T:
        """Run `operation()` under the concurrency cap and timeout.

        Raises:
            DataStoreTimeoutError: If the call did not finish in time
            DataStoreError: If the database driver raised
        """

        async def _limited() -> T:
            async with self._semaphore:
                return await operation()

        try:
            return await asyncio.wait_for(_limited(), timeout=self.timeout)
        except TimeoutError as e:
            logger.warning(
                "data_store_timeout", operation=name, timeout_seconds=self.timeout
            )
            raise DataStoreTimeoutError() from e
        except SQLAlchemyError as e:
            logger.exception("data_store_error", operation=name, error=str(e))
            raise DataStoreError() from e
