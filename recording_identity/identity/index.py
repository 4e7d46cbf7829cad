"""Read-only lookup index over a target corpus.

Build once with ``TargetIndex.build`` before any matching starts; the
index is not modified afterwards and may be shared across threads.
"""

from collections.abc import Iterable
from datetime import date
from types import MappingProxyType

import structlog

from recording_identity.models import Recording

logger = structlog.get_logger()


class TargetIndex:
    """Three lookup views over one corpus.

    Keys are not unique, so every view maps to a tuple of candidates
    in insertion order. ``position`` gives the insertion rank used to
    break ties deterministically.
    """

    def __init__(
        self,
        records: tuple[Recording, ...],
        by_primary_id: dict[str, tuple[Recording, ...]],
        by_secondary_id: dict[str, tuple[Recording, ...]],
        by_date: dict[date, tuple[Recording, ...]],
        name: str = "target",
    ):
        self.name = name
        self.records = records
        self.by_primary_id = MappingProxyType(by_primary_id)
        self.by_secondary_id = MappingProxyType(by_secondary_id)
        self.by_date = MappingProxyType(by_date)
        self._positions = {id(r): i for i, r in enumerate(records)}

    @classmethod
    def build(cls, records: Iterable[Recording], name: str = "target") -> "TargetIndex":
        """Index a corpus by primary id, secondary id, and session date.

        Args:
            records: Target corpus in a stable order
            name: Label used in logs and reports

        Returns:
            Populated, read-only TargetIndex
        """
        corpus = tuple(records)
        by_primary: dict[str, list[Recording]] = {}
        by_secondary: dict[str, list[Recording]] = {}
        by_date: dict[date, list[Recording]] = {}

        for record in corpus:
            if record.primary_id:
                by_primary.setdefault(record.primary_id, []).append(record)
            if record.secondary_id:
                by_secondary.setdefault(record.secondary_id, []).append(record)
            if record.session_date:
                by_date.setdefault(record.session_date, []).append(record)

        logger.info(
            "Built target index",
            index=name,
            records=len(corpus),
            primary_ids=len(by_primary),
            secondary_ids=len(by_secondary),
            dates=len(by_date),
        )

        return cls(
            records=corpus,
            by_primary_id={k: tuple(v) for k, v in by_primary.items()},
            by_secondary_id={k: tuple(v) for k, v in by_secondary.items()},
            by_date={k: tuple(v) for k, v in by_date.items()},
            name=name,
        )

    def position(self, record: Recording) -> int:
        """Insertion rank of a record of this index."""
        return self._positions.get(id(record), len(self.records))

    def __len__(self) -> int:
        return len(self.records)
