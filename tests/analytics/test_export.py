from __future__ import annotations

import csv
import io
from datetime import datetime

from openpyxl import load_workbook

from college_portal.analytics.export import (
    REPORT_COLUMNS,
    describe_filter,
    report_filename,
    report_rows,
    to_csv_bytes,
    to_xlsx_bytes,
)
from college_portal.attendance.filters import SessionFilter
from college_portal.attendance.model import StudentStat

ALL_BRANCHES = ["CIVIL", "EEE", "MECH", "ECE", "CSE", "IT", "CSM", "CSD"]

STATS = [
    StudentStat("23HP1A0201", "Asha", "EEE", 2, "A", 9, 10, 90),
    StudentStat("23HP1A0202", "Bala", "EEE", 2, "A", 4, 10, 40),
]


def test_csv_layout():
    raw = to_csv_bytes(report_rows(STATS))
    assert raw.startswith(b"\xef\xbb\xbf")

    rows = list(csv.reader(io.StringIO(raw.decode("utf-8-sig"))))
    assert rows[0] == REPORT_COLUMNS
    assert rows[1] == ["1", "23HP1A0201", "Asha", "EEE", "2", "A", "9", "10", "90%"]
    assert len(rows) == 3


def test_xlsx_has_banner_then_table():
    raw = to_xlsx_bytes(
        report_rows(STATS),
        header_lines=["Branches: EEE"],
        generated_at=datetime(2025, 3, 10, 14, 5),
    )
    sheet = load_workbook(io.BytesIO(raw))["Attendance"]

    assert sheet.cell(row=1, column=1).value == "Institution-Level Attendance Report"
    assert sheet.cell(row=2, column=1).value == "Branches: EEE"
    assert sheet.cell(row=3, column=1).value == "Downloaded: 10-03-2025 14:05"
    assert [c.value for c in sheet[5]] == REPORT_COLUMNS
    assert sheet.cell(row=6, column=2).value == "23HP1A0201"


def test_describe_filter():
    assert describe_filter(SessionFilter(), ALL_BRANCHES) == ("All Branches", "All Years", "All Sections")
    flt = SessionFilter(branches=frozenset({"EEE", "CSE"}), year=3, section="B")
    assert describe_filter(flt, ALL_BRANCHES) == ("CSE, EEE", "3rd Year", "Section B")
    many = SessionFilter(branches=frozenset(ALL_BRANCHES[:5]))
    assert describe_filter(many, ALL_BRANCHES)[0] == "5 Branches"


def test_report_filename():
    flt = SessionFilter(start_date="2024-01-01", end_date="2024-01-31", branches=frozenset({"EEE"}), year=2)
    assert report_filename(flt, ALL_BRANCHES, "csv") == "Attendance_Report_EEE_2nd_Year_01-01-2024_to_31-01-2024.csv"
