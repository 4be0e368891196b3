"""Export a sheet to CSV."""

import csv
from pathlib import Path

from .models import SheetKey
from .sheets import SheetStore


def export_sheet_csv(sheets: SheetStore, key: SheetKey, output_path: Path) -> int:
    """Write the sheet (header included) to output_path. Returns the data row count."""
    sheet = sheets.lookup(key)
    if sheet is None:
        raise LookupError(f"No {key.kind} sheet for stars {key.low}..{key.high}")

    rows = sheets.read_rows(sheet)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerows(rows)
    return max(len(rows) - 1, 0)
