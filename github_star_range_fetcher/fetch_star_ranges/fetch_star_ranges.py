"""Collect every repo in a star range, chunk by chunk, into one master sheet."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from ..exceptions import InvalidRangeError
from ..graphql import GraphQLClient
from ..merge_chunks import merge_chunks
from ..models import DEFAULT_CHUNK_CAPACITY, DEFAULT_CHUNK_SIZE, PAGE_SIZE, ChunkResult, SheetKey, master_label
from ..settings import get_settings
from ..sheets import SheetStore
from ..transport import RetryingTransport
from .fetch_chunk import fetch_chunk
from .plan_chunks import plan_chunks

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    master_label: str
    row_count: int
    chunks: list[ChunkResult] = field(default_factory=list)

    @property
    def degraded(self) -> list[ChunkResult]:
        return [c for c in self.chunks if c.degraded]

    @property
    def fetched_count(self) -> int:
        return sum(c.fetched_count for c in self.chunks)


def fetch_star_ranges(
    min_stars,
    max_stars,
    db_path: Path | None = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    capacity: int = DEFAULT_CHUNK_CAPACITY,
    page_size: int = PAGE_SIZE,
    transport: RetryingTransport | None = None,
) -> RunResult | None:
    """Fetch all chunks of [min_stars, max_stars] sequentially, then merge them.

    Returns None (after logging) when the range is invalid; nothing is
    created in that case. Otherwise always completes and returns the run
    summary, whatever happened to individual chunks.
    """
    try:
        plan = plan_chunks(min_stars, max_stars, chunk_size, capacity)
    except InvalidRangeError as e:
        logger.error("Invalid star range min=%r max=%r: %s", min_stars, max_stars, e)
        return None

    low, high = plan.star_range.low, plan.star_range.high
    label = master_label(low, high)
    logger.info("Collecting stars=%d..%d in %d chunks of %d (capacity %d)", low, high, len(plan), chunk_size, capacity)

    sheets = SheetStore(db_path)
    sheets.init()

    client = None
    if transport is None:
        settings = get_settings()
        client = GraphQLClient()
        transport = RetryingTransport(
            client.post,
            max_attempts=settings.max_attempts,
            retry_delay=settings.retry_delay,
            success_delay=settings.success_delay,
        )

    results: list[ChunkResult] = []
    try:
        for i, chunk in enumerate(plan, start=1):
            logger.info("Chunk %d/%d stars=%s", i, len(plan), chunk)
            results.append(fetch_chunk(chunk, transport, sheets, page_size=page_size))
    finally:
        if client is not None:
            client.close()

    merged = merge_chunks(sheets, [r.key for r in results], SheetKey.master(low, high), label)
    run = RunResult(master_label=label, row_count=merged.row_count, chunks=results)

    logger.info(
        "Done. %s rows=%d fetched=%d degraded=%d",
        label, run.row_count, run.fetched_count, len(run.degraded),
    )
    for c in run.degraded:
        logger.warning("Degraded chunk=%s reason=%s label=%s", c.chunk, c.degraded_reason, c.label)
    return run
