"""Destinations for flattened record batches.

A sink receives a complete ``RecordBatch`` once the walk of one document
has finished. ``DatabaseSink`` writes it in a single transaction;
``MemorySink`` keeps it in memory for dry runs and tests.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from typing import TYPE_CHECKING

from aasdb.persistence.tables import Base

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from aasdb.core.batch import RecordBatch

logger = logging.getLogger(__name__)


class RecordSink(ABC):
    """Abstract base class for batch destinations."""

    @abstractmethod
    async def commit(self, batch: RecordBatch) -> None:
        """Persist every record of ``batch`` atomically."""
        pass


class MemorySink(RecordSink):
    """Keeps committed batches in order of commit."""

    def __init__(self) -> None:
        self.batches: list[RecordBatch] = []

    async def commit(self, batch: RecordBatch) -> None:
        self.batches.append(batch)

    def counts(self) -> dict[str, int]:
        """Record counts per table name over all committed batches."""
        totals: dict[str, int] = defaultdict(int)
        for batch in self.batches:
            for table, count in batch.counts().items():
                totals[table] += count
        return dict(totals)


class DatabaseSink(RecordSink):
    """Writes batches through an ``AsyncSession``.

    Records carry no ORM relationships, so the unit of work cannot order
    inserts by itself. Records are added table by table in foreign-key
    dependency order and flushed after each table; within a table the batch
    order is kept (the session inserts rows of one table in the order they
    were added), so parent elements are inserted before their children.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def commit(self, batch: RecordBatch) -> None:
        by_table: dict[str, list[Base]] = defaultdict(list)
        for record in batch.records:
            by_table[record.__tablename__].append(record)

        try:
            for table in Base.metadata.sorted_tables:
                records = by_table.get(table.name)
                if not records:
                    continue
                self.session.add_all(records)
                await self.session.flush()
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info(f"Committed {len(batch)} records for environment {batch.environment.id}")
