"""Key-value repository — data access layer for durable string entries."""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from clicktales.models.kv_entry import KeyValueEntry


class KeyValueRepository:
    """Encapsulates all database queries related to key-value entries.

    Writes are flushed but not committed; the caller owns the transaction.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, key: str) -> str | None:
        """Return the stored value for *key*, or ``None``."""
        stmt = select(KeyValueEntry.value).where(KeyValueEntry.key == key)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def put(self, key: str, value: str) -> None:
        """Insert or overwrite the value for *key*."""
        entry = await self._session.get(KeyValueEntry, key)
        if entry is None:
            self._session.add(KeyValueEntry(key=key, value=value))
        else:
            entry.value = value
        await self._session.flush()

    async def delete(self, key: str) -> None:
        """Remove *key* if present."""
        await self._session.execute(delete(KeyValueEntry).where(KeyValueEntry.key == key))
