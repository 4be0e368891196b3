"""SQLite-backed sheet store: named tabular sheets with 1-indexed rows."""

import json
import sqlite3
from pathlib import Path

from .exceptions import SheetNameCollision
from .models import Sheet, SheetKey

DEFAULT_DB_PATH = Path(__file__).parent.parent / "results" / "sheets.db"

SCHEMA = """
CREATE TABLE IF NOT EXISTS sheets (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL UNIQUE,
    kind TEXT NOT NULL,  -- 'chunk' or 'master'
    low INTEGER NOT NULL,
    high INTEGER NOT NULL,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    UNIQUE (kind, low, high)
);

CREATE TABLE IF NOT EXISTS sheet_rows (
    sheet_id INTEGER NOT NULL REFERENCES sheets(id),
    row_num INTEGER NOT NULL,
    cells TEXT NOT NULL,  -- JSON array
    PRIMARY KEY (sheet_id, row_num)
);
"""


def _to_sheet(row: sqlite3.Row) -> Sheet:
    return Sheet(id=row["id"], key=SheetKey(row["kind"], row["low"], row["high"]), name=row["name"])


class SheetStore:
    """Tabular sink holding chunk sheets and the master sheet.

    Each method opens its own connection; a store instance is just a path and
    is passed explicitly to whoever reads or writes sheets.
    """

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or DEFAULT_DB_PATH

    def init(self) -> None:
        """Initialize the database schema."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.db_path, timeout=30)
        conn.execute("PRAGMA journal_mode=WAL")
        conn.executescript(SCHEMA)
        conn.commit()
        conn.close()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, timeout=30)
        conn.execute("PRAGMA journal_mode=WAL")
        conn.row_factory = sqlite3.Row
        return conn

    def create_sheet(self, key: SheetKey, name: str) -> Sheet:
        """Create an empty sheet. Raises SheetNameCollision if the name is taken."""
        conn = self._connect()
        try:
            cursor = conn.execute(
                "INSERT INTO sheets (name, kind, low, high) VALUES (?, ?, ?, ?)",
                (name, key.kind, key.low, key.high),
            )
            conn.commit()
            sheet_id = cursor.lastrowid
        except sqlite3.IntegrityError as e:
            raise SheetNameCollision(name) from e
        finally:
            conn.close()
        return Sheet(id=sheet_id, key=key, name=name)

    def write_rows(self, sheet: Sheet, start_row: int, rows: list[list]) -> int:
        """Write rows starting at start_row (1-indexed), overwriting. Returns rows written."""
        if not rows:
            return 0
        conn = self._connect()
        conn.executemany(
            "INSERT OR REPLACE INTO sheet_rows (sheet_id, row_num, cells) VALUES (?, ?, ?)",
            [(sheet.id, start_row + i, json.dumps(list(row))) for i, row in enumerate(rows)],
        )
        conn.commit()
        conn.close()
        return len(rows)

    def read_rows(self, sheet: Sheet, start_row: int = 1, count: int | None = None) -> list[list]:
        """Read rows in order starting at start_row. count=None reads to the end."""
        conn = self._connect()
        if count is None:
            cursor = conn.execute(
                "SELECT cells FROM sheet_rows WHERE sheet_id = ? AND row_num >= ? ORDER BY row_num",
                (sheet.id, start_row),
            )
        else:
            cursor = conn.execute(
                "SELECT cells FROM sheet_rows WHERE sheet_id = ? AND row_num >= ? AND row_num < ? "
                "ORDER BY row_num",
                (sheet.id, start_row, start_row + count),
            )
        rows = [json.loads(row["cells"]) for row in cursor.fetchall()]
        conn.close()
        return rows

    def row_count(self, sheet: Sheet) -> int:
        """Number of rows in the sheet, header included."""
        conn = self._connect()
        count = conn.execute("SELECT COUNT(*) FROM sheet_rows WHERE sheet_id = ?", (sheet.id,)).fetchone()[0]
        conn.close()
        return count

    def rename(self, sheet: Sheet, new_name: str) -> Sheet:
        """Rename a sheet. Raises SheetNameCollision if another sheet has new_name."""
        if new_name == sheet.name:
            return sheet
        conn = self._connect()
        try:
            conn.execute("UPDATE sheets SET name = ? WHERE id = ?", (new_name, sheet.id))
            conn.commit()
        except sqlite3.IntegrityError as e:
            raise SheetNameCollision(new_name) from e
        finally:
            conn.close()
        return Sheet(id=sheet.id, key=sheet.key, name=new_name)

    def delete(self, sheet: Sheet) -> None:
        """Delete a sheet and all its rows."""
        conn = self._connect()
        conn.execute("DELETE FROM sheet_rows WHERE sheet_id = ?", (sheet.id,))
        conn.execute("DELETE FROM sheets WHERE id = ?", (sheet.id,))
        conn.commit()
        conn.close()

    def lookup(self, key: SheetKey) -> Sheet | None:
        """Find a sheet by its structural key."""
        conn = self._connect()
        row = conn.execute(
            "SELECT id, name, kind, low, high FROM sheets WHERE kind = ? AND low = ? AND high = ?",
            (key.kind, key.low, key.high),
        ).fetchone()
        conn.close()
        return _to_sheet(row) if row else None

    def lookup_name(self, name: str) -> Sheet | None:
        """Find a sheet by display name."""
        conn = self._connect()
        row = conn.execute("SELECT id, name, kind, low, high FROM sheets WHERE name = ?", (name,)).fetchone()
        conn.close()
        return _to_sheet(row) if row else None

    def list_sheets(self, kind: str | None = None) -> list[Sheet]:
        """List sheets ordered by kind, then range."""
        conn = self._connect()
        if kind is None:
            cursor = conn.execute("SELECT id, name, kind, low, high FROM sheets ORDER BY kind, low, high")
        else:
            cursor = conn.execute(
                "SELECT id, name, kind, low, high FROM sheets WHERE kind = ? ORDER BY low, high",
                (kind,),
            )
        sheets = [_to_sheet(row) for row in cursor.fetchall()]
        conn.close()
        return sheets
