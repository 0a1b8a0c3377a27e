"""
Persistence of improvement requests.

Each successful /improve call is stored as one row of the ``requests``
table (see schema.sql). Errors from the driver are wrapped in
PersistenceError so callers can treat storage as best-effort.
"""

import logging
from dataclasses import dataclass, asdict
from datetime import datetime
from typing import List, Optional

import asyncpg

from bullet_improver.errors import PersistenceError
from storage.db import get_connection

logger = logging.getLogger(__name__)


@dataclass
class RequestRecord:
    """A persisted input/output pair."""
    id: str
    input_text: str
    output_text: str
    created_at: Optional[datetime]

    @classmethod
    def from_record(cls, record) -> "RequestRecord":
        """Create a RequestRecord from a database record."""
        return cls(
            id=str(record["id"]),
            input_text=record["input_text"],
            output_text=record["output_text"],
            created_at=record["created_at"],
        )

    def to_dict(self) -> dict:
        data = asdict(self)
        data["created_at"] = self.created_at.isoformat() if self.created_at else None
        return data


class RequestStore:
    """PostgreSQL-backed sink for improvement requests."""

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    async def insert(self, input_text: str, output_text: str) -> RequestRecord:
        """
        Store one input/output pair.

        Returns:
            The inserted row, including its generated id and timestamp.
        """
        query = """
            INSERT INTO requests (input_text, output_text)
            VALUES ($1, $2)
            RETURNING id, input_text, output_text, created_at
        """
        try:
            async with get_connection(self._pool) as conn:
                row = await conn.fetchrow(query, input_text, output_text)
        except (asyncpg.PostgresError, OSError) as e:
            raise PersistenceError(f"Failed to insert request: {e}") from e

        record = RequestRecord.from_record(row)
        logger.info(f"Stored request {record.id}")
        return record

    async def list_recent(self, limit: int = 20) -> List[RequestRecord]:
        """Most recent requests, newest first."""
        query = """
            SELECT id, input_text, output_text, created_at
            FROM requests
            ORDER BY created_at DESC
            LIMIT $1
        """
        try:
            async with get_connection(self._pool) as conn:
                rows = await conn.fetch(query, limit)
        except (asyncpg.PostgresError, OSError) as e:
            raise PersistenceError(f"Failed to list requests: {e}") from e

        return [RequestRecord.from_record(r) for r in rows]
