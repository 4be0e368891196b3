"""Merge chunk sheets, in order, into one master sheet."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from ..models import COLUMNS, Sheet, SheetKey
from ..sheets import SheetStore

logger = logging.getLogger(__name__)


@dataclass
class MergeResult:
    sheet: Sheet
    row_count: int = 0
    merged: list[SheetKey] = field(default_factory=list)
    skipped_missing: list[SheetKey] = field(default_factory=list)
    skipped_empty: list[SheetKey] = field(default_factory=list)


def _bounds(key: SheetKey) -> str:
    return f"{key.low}..{key.high}"


def merge_chunks(
    sheets: SheetStore,
    chunk_keys: Sequence[SheetKey],
    master_key: SheetKey,
    master_label: str,
    append: bool = False,
) -> MergeResult:
    """Copy each chunk's data rows into the master sheet, then drop the chunk.

    By default an existing master with the same key is replaced. With
    append=True its rows are kept and the chunks are copied after them.
    Missing chunks and header-only chunks are skipped. A chunk sheet is
    deleted only after the master row count confirms its rows landed.
    """
    existing = sheets.lookup(master_key)
    if existing is not None and append:
        master = existing
        if sheets.row_count(master) == 0:
            sheets.write_rows(master, 1, [list(COLUMNS)])
        write_row = sheets.row_count(master) + 1
        logger.info("Appending to master sheet %s at row=%d", master.name, write_row)
    else:
        if existing is not None:
            logger.info("Replacing existing master sheet %s", existing.name)
            sheets.delete(existing)
        master = sheets.create_sheet(master_key, master_label)
        sheets.write_rows(master, 1, [list(COLUMNS)])
        write_row = 2
    result = MergeResult(sheet=master)

    for key in chunk_keys:
        chunk_sheet = sheets.lookup(key)
        if chunk_sheet is None:
            logger.warning("Missing sheet for chunk=%s, skipping", _bounds(key))
            result.skipped_missing.append(key)
            continue

        rows = sheets.read_rows(chunk_sheet, start_row=2)
        if not rows:
            logger.info("Chunk=%s has no data rows, skipping", _bounds(key))
            result.skipped_empty.append(key)
            continue

        sheets.write_rows(master, write_row, rows)
        expected = write_row + len(rows) - 1
        actual = sheets.row_count(master)
        if actual != expected:
            logger.error(
                "Copy check failed chunk=%s expected_rows=%d actual_rows=%d, keeping chunk sheet",
                _bounds(key), expected, actual,
            )
            write_row = actual + 1
            continue

        write_row += len(rows)
        sheets.delete(chunk_sheet)
        result.merged.append(key)
        logger.info("Merged chunk=%s rows=%d into %s", _bounds(key), len(rows), master_label)

    result.row_count = write_row - 2
    logger.info(
        "Master %s rows=%d merged=%d missing=%d empty=%d",
        master_label, result.row_count, len(result.merged),
        len(result.skipped_missing), len(result.skipped_empty),
    )
    return result
