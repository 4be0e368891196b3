"""Tests for CSV export."""

import csv

import pytest

from .export import export_sheet_csv
from .models import COLUMNS, SheetKey
from .sheets import SheetStore


@pytest.fixture
def sheets(tmp_path):
    s = SheetStore(tmp_path / "test.db")
    s.init()
    return s


def describe_export_sheet_csv():

    def it_writes_header_and_rows(sheets, tmp_path):
        key = SheetKey.master(1, 100)
        sheet = sheets.create_sheet(key, "AllRepos_1_to_100")
        sheets.write_rows(
            sheet,
            1,
            [
                list(COLUMNS),
                ["https://github.com/a/b", 90, "https://b.dev", "2024-01-01T00:00:00Z", None],
                ["https://github.com/c/d", 12, None, "2024-01-02T00:00:00Z", "Y3Vyc29yOjE="],
            ],
        )
        out = tmp_path / "nested" / "out.csv"

        count = export_sheet_csv(sheets, key, out)

        assert count == 2
        with open(out, newline="") as f:
            rows = list(csv.reader(f))
        assert rows[0] == list(COLUMNS)
        assert rows[1] == ["https://github.com/a/b", "90", "https://b.dev", "2024-01-01T00:00:00Z", ""]
        assert rows[2][4] == "Y3Vyc29yOjE="

    def it_counts_zero_for_header_only_sheet(sheets, tmp_path):
        key = SheetKey.master(1, 100)
        sheets.write_rows(sheets.create_sheet(key, "AllRepos_1_to_100"), 1, [list(COLUMNS)])
        assert export_sheet_csv(sheets, key, tmp_path / "out.csv") == 0

    def it_raises_for_missing_sheet(sheets, tmp_path):
        with pytest.raises(LookupError, match="1..100"):
            export_sheet_csv(sheets, SheetKey.master(1, 100), tmp_path / "out.csv")
        assert not (tmp_path / "out.csv").exists()
