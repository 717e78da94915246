from __future__ import annotations

import csv
import io
from datetime import datetime
from typing import Iterable, Optional, Sequence

import pandas as pd

from ..attendance.filters import SessionFilter
from ..attendance.model import StudentStat
from ..common.datetime_utils import format_display_date, ordinal
from ..core.constants import ALL_SECTIONS, ALL_YEARS

REPORT_COLUMNS = [
    "S.No",
    "Reg No",
    "Name",
    "Branch",
    "Year",
    "Section",
    "Classes Attended",
    "Total Classes",
    "Percentage",
]

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def report_rows(stats: Iterable[StudentStat]) -> list[dict]:
    return [
        {
            "S.No": i,
            "Reg No": s.student_id,
            "Name": s.name,
            "Branch": s.branch or "",
            "Year": s.year if s.year is not None else "",
            "Section": s.section or "",
            "Classes Attended": s.present,
            "Total Classes": s.total,
            "Percentage": f"{s.percent}%",
        }
        for i, s in enumerate(stats, start=1)
    ]


def describe_filter(flt: SessionFilter, all_branches: Sequence[str]) -> tuple[str, str, str]:
    """Branch, year and section captions used in report headers and file names."""
    selected = sorted(flt.branches)
    if not selected or set(selected) >= set(all_branches):
        branches = "All Branches"
    elif len(selected) <= 3:
        branches = ", ".join(selected)
    else:
        branches = f"{len(selected)} Branches"

    year = "All Years" if flt.year == ALL_YEARS else f"{ordinal(flt.year)} Year"
    section = "All Sections" if flt.section == ALL_SECTIONS else f"Section {flt.section}"
    return branches, year, section


def report_filename(flt: SessionFilter, all_branches: Sequence[str], extension: str) -> str:
    branches, year, _ = describe_filter(flt, all_branches)
    start = format_display_date(flt.start_date or "") or "start"
    end = format_display_date(flt.end_date or "") or "today"
    name = f"Attendance_Report_{branches.replace(', ', '_')}_{year}_{start}_to_{end}"
    return f"{name.replace(' ', '_')}.{extension}"


def to_csv_bytes(rows: Sequence[dict]) -> bytes:
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=REPORT_COLUMNS)
    writer.writeheader()
    for row in rows:
        writer.writerow(row)
    # BOM so spreadsheet apps detect UTF-8 names.
    return out.getvalue().encode("utf-8-sig")


def to_xlsx_bytes(
    rows: Sequence[dict],
    *,
    title: str = "Institution-Level Attendance Report",
    header_lines: Sequence[str] = (),
    generated_at: Optional[datetime] = None,
) -> bytes:
    """Single-sheet workbook: title block, blank spacer row, then the table."""
    generated_at = generated_at or datetime.now()
    banner = [title, *header_lines, f"Downloaded: {generated_at:%d-%m-%Y %H:%M}"]

    df = pd.DataFrame(list(rows), columns=REPORT_COLUMNS)
    out = io.BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name="Attendance", index=False, startrow=len(banner) + 1)
        sheet = writer.sheets["Attendance"]
        last_col = len(REPORT_COLUMNS)
        for i, line in enumerate(banner, start=1):
            sheet.cell(row=i, column=1, value=line)
            sheet.merge_cells(start_row=i, start_column=1, end_row=i, end_column=last_col)
    return out.getvalue()
