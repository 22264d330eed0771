"""Durable string-keyed storage used to persist client-side snapshots."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from clicktales.database.repository import KeyValueRepository

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """Minimal async get / set / delete capability over string keys."""

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the value for *key*, or ``None`` when absent."""

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Store *value* under *key*, overwriting any previous value."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove *key*; a missing key is not an error."""


class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store; contents are lost on restart."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data


class SqlKeyValueStore(KeyValueStore):
    """Store backed by the ``kv_entries`` table.

    Every call runs in its own short transaction.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get(self, key: str) -> str | None:
        async with self._session_factory() as session:
            return await KeyValueRepository(session).get(key)

    async def set(self, key: str, value: str) -> None:
        async with self._session_factory() as session:
            await KeyValueRepository(session).put(key, value)
            await session.commit()
        logger.debug("Stored key %s", key)

    async def delete(self, key: str) -> None:
        async with self._session_factory() as session:
            await KeyValueRepository(session).delete(key)
            await session.commit()
        logger.debug("Deleted key %s", key)
