from __future__ import annotations

import calendar
import io
from dataclasses import dataclass
from typing import Iterable, Mapping

import pandas as pd
from openpyxl.utils import get_column_letter

from tracker.services.entries import DailyEntry
from tracker.utils import format_percent, parse_iso_date

UNKNOWN_NAME = "Unknown"
SHEET_NAME = "Collections"
XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

EXPORT_COLUMNS = ["Date", "Branch", "Executive", "Target", "ACH", "Cash", "Balance", "Achievement %"]
COLUMN_WIDTHS = [12, 20, 20, 10, 10, 10, 10, 15]


@dataclass(frozen=True)
class ExportLabel:
    kind: str      # daily / monthly / range
    title: str
    filename: str  # without extension


def project_for_export(
    entries: Iterable[DailyEntry],
    branch_name_of: Mapping[int, str],
    executive_name_of: Mapping[int, str],
) -> list[dict]:
    """Flat rows in EXPORT_COLUMNS order; percent is already formatted for reading."""
    rows = []
    for e in entries:
        rows.append(
            {
                "Date": e.entry_date,
                "Branch": branch_name_of.get(e.branch_id, UNKNOWN_NAME),
                "Executive": executive_name_of.get(e.executive_id, UNKNOWN_NAME),
                "Target": int(e.target),
                "ACH": int(e.achieved),
                "Cash": int(e.cash),
                "Balance": int(e.balance),
                "Achievement %": f"{format_percent(e.achievement_percent, 1)}%",
            }
        )
    return rows


def export_label(start: str, end: str) -> ExportLabel:
    # Naming only: the exported rows are never filtered by this.
    s = parse_iso_date(start)
    e = parse_iso_date(end)
    if s == e:
        return ExportLabel("daily", s.isoformat(), f"Daily_Collection_{s.isoformat()}")
    if (s.year, s.month) == (e.year, e.month):
        month = calendar.month_name[s.month]
        return ExportLabel("monthly", f"{month} {s.year}", f"Monthly_Collection_{month}_{s.year}")
    return ExportLabel(
        "range",
        f"{s.isoformat()} to {e.isoformat()}",
        f"Collection_{s.isoformat()}_to_{e.isoformat()}",
    )


def rows_to_xlsx(rows: list[dict]) -> bytes:
    df = pd.DataFrame(rows, columns=EXPORT_COLUMNS)
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=SHEET_NAME)
        ws = writer.sheets[SHEET_NAME]
        for idx, width in enumerate(COLUMN_WIDTHS, start=1):
            ws.column_dimensions[get_column_letter(idx)].width = width
    return buffer.getvalue()
