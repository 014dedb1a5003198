"""Unit tests for the in-memory commitment repository."""

from __future__ import annotations

import asyncio
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone

import pytest

from lnurlpay.domain.entities import Commitment
from lnurlpay.infrastructure.commitment_repository_impl import (
    InMemoryCommitmentRepository,
)

METADATA = '[["text/plain","abc123"]]'


@pytest.mark.asyncio
async def test_take_returns_commitment_once() -> None:
    repo = InMemoryCommitmentRepository()
    await repo.put(Commitment(id="abc123", metadata_text=METADATA))

    taken = await repo.take_and_remove("abc123")
    assert taken is not None
    assert taken.metadata_text == METADATA
    assert await repo.take_and_remove("abc123") is None
    assert len(repo) == 0


@pytest.mark.asyncio
async def test_take_unknown_id_returns_none() -> None:
    repo = InMemoryCommitmentRepository()
    assert await repo.take_and_remove("missing") is None


@pytest.mark.asyncio
async def test_put_overwrites_colliding_id() -> None:
    repo = InMemoryCommitmentRepository()
    await repo.put(Commitment(id="dup", metadata_text="first"))
    await repo.put(Commitment(id="dup", metadata_text="second"))

    assert len(repo) == 1
    taken = await repo.take_and_remove("dup")
    assert taken is not None and taken.metadata_text == "second"


@pytest.mark.asyncio
async def test_concurrent_tasks_take_exactly_once() -> None:
    repo = InMemoryCommitmentRepository()
    await repo.put(Commitment(id="race", metadata_text=METADATA))

    results = await asyncio.gather(*(repo.take_and_remove("race") for _ in range(50)))

    assert sum(r is not None for r in results) == 1


def test_concurrent_threads_take_exactly_once() -> None:
    repo = InMemoryCommitmentRepository()
    asyncio.run(repo.put(Commitment(id="race", metadata_text=METADATA)))

    def take() -> object:
        return asyncio.run(repo.take_and_remove("race"))

    with ThreadPoolExecutor(max_workers=16) as pool:
        results = list(pool.map(lambda _: take(), range(64)))

    assert sum(r is not None for r in results) == 1
    assert len(repo) == 0


@pytest.mark.asyncio
async def test_evict_older_than_removes_only_expired() -> None:
    repo = InMemoryCommitmentRepository()
    now = datetime.now(timezone.utc)
    await repo.put(
        Commitment(id="old", metadata_text=METADATA, created_at=now - timedelta(hours=1))
    )
    await repo.put(Commitment(id="fresh", metadata_text=METADATA, created_at=now))

    evicted = await repo.evict_older_than(now - timedelta(minutes=10))

    assert evicted == 1
    assert await repo.take_and_remove("old") is None
    assert await repo.take_and_remove("fresh") is not None


def test_commitment_is_immutable() -> None:
    commitment = Commitment(id="abc123", metadata_text=METADATA)
    with pytest.raises(Exception):
        commitment.metadata_text = "tampered"  # type: ignore[misc]
