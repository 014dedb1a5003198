"""Periodic eviction of commitments that were issued but never redeemed."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from ..domain.repositories import CommitmentRepository

logger = logging.getLogger(__name__)


class CommitmentSweeper:
    """Background task that drops commitments older than `ttl_seconds`."""

    def __init__(
        self,
        repository: CommitmentRepository,
        ttl_seconds: float,
        interval_seconds: float = 60.0,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be > 0")
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be > 0")
        self._repository = repository
        self._ttl = timedelta(seconds=ttl_seconds)
        self._interval = interval_seconds
        self._task: Optional[asyncio.Task[None]] = None

    async def sweep_once(self) -> int:
        cutoff = datetime.now(timezone.utc) - self._ttl
        evicted = await self._repository.evict_older_than(cutoff)
        if evicted:
            logger.info("Evicted %d expired commitment(s)", evicted)
        return evicted

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                await self.sweep_once()
            except Exception:
                logger.exception("Commitment sweep failed")

    def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
