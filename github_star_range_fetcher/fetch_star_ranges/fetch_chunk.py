"""Fetch one star chunk via cursor pagination into its own sheet."""

import logging

from ..exceptions import ApiPayloadError, SheetNameCollision
from ..graphql import build_search_request, parse_search_page
from ..models import (
    COLUMNS,
    MAX_LABEL_LENGTH,
    PAGE_SIZE,
    Chunk,
    ChunkResult,
    RepositoryRecord,
    SheetKey,
)
from ..sheets import SheetStore
from ..transport import RetryingTransport

logger = logging.getLogger(__name__)

# Descending sort keeps the most-starred repos when capacity truncates a chunk
SEARCH_TEMPLATE = "stars:{low}..{high} fork:false sort:stars-desc"

TRANSPORT_EXHAUSTED = "transport_exhausted"
API_ERROR = "api_error"


def working_label(chunk: Chunk) -> str:
    return f"Repos_{chunk.low}_to_{chunk.high}"


def finalized_label(
    chunk: Chunk,
    reported_total_count: int,
    fetched_count: int,
    last_cursor: str | None,
    degraded: bool = False,
) -> str:
    """Label embedding bounds, counts and last cursor, capped at MAX_LABEL_LENGTH."""
    partial = "_partial" if degraded else ""
    label = (
        f"Repos_{chunk.low}-{chunk.high}_total{reported_total_count}"
        f"_fetched{fetched_count}{partial}_cursor{last_cursor or 'none'}"
    )
    return label[:MAX_LABEL_LENGTH]


def fetch_chunk(
    chunk: Chunk,
    transport: RetryingTransport,
    sheets: SheetStore,
    page_size: int = PAGE_SIZE,
    search_template: str = SEARCH_TEMPLATE,
) -> ChunkResult:
    """Fetch up to chunk.capacity repos for the chunk, writing each page as it arrives.

    Always returns a ChunkResult. Retry exhaustion and GraphQL errors stop the
    loop and mark the result degraded; rows already written are kept.
    """
    key = SheetKey.chunk(chunk.low, chunk.high)
    stale = sheets.lookup(key)
    if stale is not None:
        logger.info("Replacing stale sheet %s for chunk=%s", stale.name, chunk)
        sheets.delete(stale)

    sheet = sheets.create_sheet(key, working_label(chunk))
    sheets.write_rows(sheet, 1, [list(COLUMNS)])
    next_row = 2

    search_query = search_template.format(low=chunk.low, high=chunk.high)
    cursor = None
    has_next_page = True
    fetched = 0
    reported = 0
    degraded_reason = None

    while has_next_page and fetched < chunk.capacity:
        remaining = chunk.capacity - fetched
        body = transport.call(build_search_request(search_query, min(page_size, remaining), cursor))
        if body is None:
            degraded_reason = TRANSPORT_EXHAUSTED
            logger.error("Retries exhausted chunk=%s fetched=%d cursor=%s", chunk, fetched, cursor)
            break

        try:
            page = parse_search_page(body)
        except ApiPayloadError as e:
            degraded_reason = API_ERROR
            logger.error("API error chunk=%s fetched=%d cursor=%s: %s", chunk, fetched, cursor, e)
            break

        reported = page.total_count
        records = [RepositoryRecord.from_node(node, cursor) for node in page.nodes[:remaining]]
        next_row += sheets.write_rows(sheet, next_row, [r.to_row() for r in records])
        fetched += len(records)

        if not records:
            # hasNextPage with an empty page would loop forever
            break
        cursor = page.cursor.end_cursor
        has_next_page = page.cursor.has_next_page

    logger.info("Fetched chunk=%s reported=%d fetched=%d", chunk, reported, fetched)
    if fetched >= chunk.capacity and reported > fetched:
        logger.warning(
            "Truncated chunk=%s at capacity=%d reported=%d dropped=%d",
            chunk, chunk.capacity, reported, reported - fetched,
        )

    label = finalized_label(chunk, reported, fetched, cursor, degraded=degraded_reason is not None)
    try:
        sheet = sheets.rename(sheet, label)
    except SheetNameCollision:
        logger.warning("Could not rename sheet %s to %s, keeping working name", sheet.name, label)

    if degraded_reason:
        logger.warning(
            "ChunkDegraded chunk=%s reason=%s reported=%d fetched=%d",
            chunk, degraded_reason, reported, fetched,
        )

    return ChunkResult(
        chunk=chunk,
        key=key,
        label=sheet.name,
        reported_total_count=reported,
        fetched_count=fetched,
        last_cursor=cursor,
        degraded_reason=degraded_reason,
    )
