"""In-process commitment repository."""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Optional

from ..domain.entities import Commitment
from ..domain.repositories import CommitmentRepository


class InMemoryCommitmentRepository(CommitmentRepository):
    """Commitment table guarded by a single lock.

    The lock is held only for the dictionary operation itself, so it is safe to
    share one instance between the event loop and worker threads. Contents are
    lost when the process exits.
    """

    def __init__(self) -> None:
        self._commitments: dict[str, Commitment] = {}
        self._lock = threading.Lock()

    async def put(self, commitment: Commitment) -> None:
        with self._lock:
            self._commitments[commitment.id] = commitment

    async def take_and_remove(self, commitment_id: str) -> Optional[Commitment]:
        with self._lock:
            return self._commitments.pop(commitment_id, None)

    async def evict_older_than(self, cutoff: datetime) -> int:
        with self._lock:
            expired = [
                cid for cid, c in self._commitments.items() if c.created_at < cutoff
            ]
            for cid in expired:
                del self._commitments[cid]
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._commitments)
