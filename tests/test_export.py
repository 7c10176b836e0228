from __future__ import annotations

import io

import pytest
from openpyxl import load_workbook

from tracker.services.export import (
    EXPORT_COLUMNS,
    export_label,
    project_for_export,
    rows_to_xlsx,
)

from conftest import make_entry


class TestProjection:
    def test_row_shape(self):
        [row] = project_for_export(
            [make_entry(7, 120, 90, 60, branch_id=3, entry_date="2024-05-01")],
            {3: "Central"},
            {7: "Asha"},
        )
        assert list(row) == EXPORT_COLUMNS
        assert row == {
            "Date": "2024-05-01",
            "Branch": "Central",
            "Executive": "Asha",
            "Target": 120,
            "ACH": 90,
            "Cash": 60,
            "Balance": 30,
            "Achievement %": "75.0%",
        }

    def test_orphans_and_zero_target(self):
        [row] = project_for_export([make_entry(7, 0, 5, 0, branch_id=3)], {}, {})
        assert row["Branch"] == "Unknown" and row["Executive"] == "Unknown"
        assert row["Achievement %"] == "0.0%"
        assert row["Balance"] == -5

    def test_keeps_caller_order(self):
        entries = [make_entry(2, branch_id=2), make_entry(1, branch_id=1)]
        rows = project_for_export(entries, {1: "A", 2: "B"}, {})
        assert [r["Branch"] for r in rows] == ["B", "A"]


class TestExportLabel:
    def test_daily(self):
        label = export_label("2024-05-01", "2024-05-01")
        assert label.kind == "daily"
        assert label.filename == "Daily_Collection_2024-05-01"

    def test_monthly(self):
        label = export_label("2024-05-01", "2024-05-31")
        assert label.kind == "monthly"
        assert label.title == "May 2024"
        assert label.filename == "Monthly_Collection_May_2024"

    def test_range(self):
        label = export_label("2024-05-01", "2024-06-02")
        assert label.kind == "range"
        assert "2024-05-01" in label.title and "2024-06-02" in label.title
        assert label.filename == "Collection_2024-05-01_to_2024-06-02"

    def test_same_month_other_year_is_range(self):
        assert export_label("2023-05-01", "2024-05-01").kind == "range"

    def test_bad_date(self):
        with pytest.raises(ValueError):
            export_label("2024-13-01", "2024-05-01")


def test_xlsx_header_rows_and_widths():
    rows = project_for_export([make_entry(1, 10, 5, 2, branch_id=1)], {1: "Central"}, {1: "Asha"})
    wb = load_workbook(io.BytesIO(rows_to_xlsx(rows)))
    ws = wb["Collections"]
    values = list(ws.iter_rows(values_only=True))
    assert list(values[0]) == EXPORT_COLUMNS
    assert list(values[1]) == ["2024-05-01", "Central", "Asha", 10, 5, 2, 5, "50.0%"]
    assert ws.column_dimensions["A"].width == 12
    assert ws.column_dimensions["H"].width == 15


def test_xlsx_empty_still_has_header():
    wb = load_workbook(io.BytesIO(rows_to_xlsx([])))
    assert [c.value for c in wb["Collections"][1]] == EXPORT_COLUMNS
