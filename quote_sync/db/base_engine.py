from __future__ import annotations

import asyncio
import logging
from typing import Any

import tenacity
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from quote_sync.common.logging.json_logger import setup_logger
from quote_sync.db.utils import create_quotes_data_store_url

engines: dict[str, AsyncEngine] = {}


class RetrySettings:
    stop: tenacity.stop.stop_base = tenacity.stop_after_attempt(3)
    wait: tenacity.wait.wait_base = tenacity.wait_exponential(min=1, max=5)


def _log_after_attempt(log: logging.Logger):
    def _after_attempt(retry_state: tenacity.RetryCallState):
        outcome = retry_state.outcome
        error = outcome.exception() if outcome else None
        log.warning(
            "Temporary data store error (attempt %d): %s",
            retry_state.attempt_number,
            error,
        )
    return _after_attempt


class BaseSQLEngine:
    """
    Shared async engine access for the datastores.

    Reads are retried on transient connection errors. Datastores open their own
    session for writes and run them once.
    """

    retry_settings = RetrySettings()
    _log = setup_logger()

    def __init__(self):
        self._url: str | None = None
        self._engine: AsyncEngine | None = None
        self._sessionmaker = None

    @property
    def url(self) -> str:
        if self._url is None:
            self._url = create_quotes_data_store_url()
        return self._url

    @property
    def engine(self) -> AsyncEngine:
        try:
            if self._engine is None:
                self._engine = engines.get(self.url)
            if self._engine is None:
                self._engine = create_async_engine(
                    self.url,
                    poolclass=NullPool,
                    echo=False,
                )
                self._log.debug("SQL engine initialized")
                engines[self.url] = self._engine
            return self._engine
        except Exception as e:
            self._log.error(f"Error while creating engine: {e}")
            raise e

    @property
    def sessionmaker(self):
        if self._sessionmaker is None:
            self._sessionmaker = async_sessionmaker(self.engine, expire_on_commit=False, class_=AsyncSession)
        return self._sessionmaker

    def _retry(self) -> tenacity.AsyncRetrying:
        return tenacity.AsyncRetrying(
            stop=self.retry_settings.stop,
            wait=self.retry_settings.wait,
            retry=tenacity.retry_if_exception_type((InterfaceError, OSError, OperationalError)),
            after=_log_after_attempt(self._log),
            sleep=asyncio.sleep,
            reraise=True,
        )

    async def execute_query(self, query, params=None) -> Any | None:
        async for attempt in self._retry():
            with attempt:
                async with self.sessionmaker() as session:
                    async with session.begin():
                        return await session.execute(query, params)

    async def execute_query_fetch_all(self, query, params=None) -> list[Any]:
        res = await self.execute_query(query, params)
        if res is None:
            raise Exception(f"Could not fetch result for query: {query}")
        return list(res.scalars().all())

    async def execute_scalar(self, query, params=None) -> Any | None:
        res = await self.execute_query(query, params)
        if res:
            return res.scalars().first()

    async def close(self):
        if self._engine:
            await self._engine.dispose()
