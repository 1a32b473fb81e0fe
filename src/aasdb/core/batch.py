"""In-memory batch of records produced from one document."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import TypeVar

from aasdb.persistence.tables import Base, EnvTable

RecordT = TypeVar("RecordT", bound=Base)


@dataclass
class RecordBatch:
    """Ordered records of one environment, exclusively owned until committed.

    Records are kept in creation order: parents always precede the records
    that link to them, and submodel elements appear in document pre-order.
    """

    environment: EnvTable
    records: list[Base] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.records:
            self.records.append(self.environment)

    def append(self, record: Base) -> None:
        self.records.append(record)

    def extend(self, records: list[Base]) -> None:
        self.records.extend(records)

    def of_type(self, table: type[RecordT]) -> list[RecordT]:
        """Records of one table, in batch order."""
        return [record for record in self.records if isinstance(record, table)]

    def counts(self) -> dict[str, int]:
        """Number of records per table name."""
        return dict(Counter(record.__tablename__ for record in self.records))

    def __len__(self) -> int:
        return len(self.records)
