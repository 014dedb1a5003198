"""Domain repository interfaces."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from .entities import Commitment


class CommitmentRepository(ABC):
    """Single-use holding area for commitments awaiting redemption."""

    @abstractmethod
    async def put(self, commitment: Commitment) -> None:
        """Store a commitment, replacing any entry with the same id."""
        pass

    @abstractmethod
    async def take_and_remove(self, commitment_id: str) -> Optional[Commitment]:
        """Atomically remove and return a commitment.

        At most one caller observes a given commitment; every other caller gets
        None.
        """
        pass

    @abstractmethod
    async def evict_older_than(self, cutoff: datetime) -> int:
        """Drop commitments created before `cutoff`; return how many."""
        pass

    @abstractmethod
    def __len__(self) -> int:
        pass
