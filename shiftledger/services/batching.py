"""
Chunked batch runner with pauses, per-chunk error capture and cancellation.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterator, Sequence
from dataclasses import dataclass, field
from typing import TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shiftledger.core.config import settings
from shiftledger.core.exceptions import ShiftLedgerError
from shiftledger.services import store

logger = logging.getLogger(__name__)

T = TypeVar("T")

ShouldCancel = Callable[[], Awaitable[bool]]
ChunkHandler = Callable[[Sequence[T]], Awaitable[tuple[int, list[dict]]]]


@dataclass
class BatchResult:
    success_count: int = 0
    errors: list[dict] = field(default_factory=list)
    cancelled: bool = False


def chunked(items: Sequence[T], size: int) -> Iterator[Sequence[T]]:
    for start in range(0, len(items), size):
        yield items[start:start + size]


async def run_in_chunks(
    db: AsyncSession,
    items: Sequence[T],
    handle_chunk: ChunkHandler,
    *,
    label: str,
    chunk_size: int | None = None,
    pause: float | None = None,
    should_cancel: ShouldCancel | None = None,
) -> BatchResult:
    """Feed *items* to *handle_chunk* in committed chunks.

    The handler returns ``(successes, item_errors)``.  A chunk that raises
    is rolled back and reported as one error; later chunks still run.
    Cancellation is checked before each chunk and never undoes committed
    chunks.
    """
    size = chunk_size or settings.BATCH_CHUNK_SIZE
    delay = settings.BATCH_CHUNK_PAUSE_SECONDS if pause is None else pause
    result = BatchResult()

    for index, chunk in enumerate(chunked(items, size)):
        if index and delay > 0:
            await asyncio.sleep(delay)
        if should_cancel is not None and await should_cancel():
            result.cancelled = True
            logger.warning("%s cancelled before chunk %d", label, index)
            break
        try:
            successes, item_errors = await handle_chunk(chunk)
            await store.commit(db)
        except (ShiftLedgerError, SQLAlchemyError) as exc:
            await db.rollback()
            logger.error("%s chunk %d failed: %s", label, index, exc)
            result.errors.append({"chunk": index, "size": len(chunk), "error": str(exc)})
            continue
        result.success_count += successes
        result.errors.extend(item_errors)

    logger.info(
        "%s finished: %d ok, %d errors%s",
        label,
        result.success_count,
        len(result.errors),
        " (cancelled)" if result.cancelled else "",
    )
    return result
