"""Registration number classifier.

Layout of a registration number such as ``23HP1A0202``::

    23   HP   1A   02   02
    |    |    |    |    +-- roll number
    |    |    |    +------- branch code
    |    |    +------------ entry code (1A regular, 5A lateral entry)
    |    +----------------- college code
    +---------------------- admission year (two digits)

Validation is progressive: each segment is checked as soon as enough
characters are present, so a partially typed number reports the first
problem found. The classifier never raises.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Optional

from ..core.constants import ACADEMIC_YEAR_START_MONTH, COLLEGE_CODE, MAX_STUDY_YEAR, MIN_STUDY_YEAR
from ..core.enums import Branch, EntryType
from .model import ClassifiedIdentifier

BRANCH_CODES: dict[str, Branch] = {
    "01": Branch.CIVIL,
    "02": Branch.EEE,
    "03": Branch.MECH,
    "04": Branch.ECE,
    "05": Branch.CSE,
    "12": Branch.IT,
    "42": Branch.CSM,
    "44": Branch.CSD,
}

DEPARTMENTS: dict[Branch, str] = {
    Branch.CIVIL: "Civil Engineering",
    Branch.EEE: "Electrical and Electronics Engineering",
    Branch.MECH: "Mechanical Engineering",
    Branch.ECE: "Electronics and Communication Engineering",
    Branch.CSE: "Computer Science and Engineering",
    Branch.IT: "Information Technology",
    Branch.CSM: "Computer Science and Engineering (AI & ML)",
    Branch.CSD: "Computer Science and Engineering (Data Science)",
}

ENTRY_CODES: dict[str, EntryType] = {
    "1A": EntryType.REGULAR,
    "5A": EntryType.LATERAL_ENTRY,
}

VALID_BRANCH_FIRST_DIGITS = ("0", "1", "4")

WARN_REQUIRED = "Registration number is required"
WARN_YEAR = "Invalid Year Format"
WARN_COLLEGE = f"Invalid College Code (Must be {COLLEGE_CODE})"
WARN_ENTRY = "Invalid Entry Code (Must be 1A or 5A)"
WARN_BRANCH = "No Branch Found Re-check Ones"
WARN_INCOMPLETE = "Incomplete Registration Number"


def academic_years_elapsed(admission_year: int, as_of: date) -> int:
    """Study year of a regular student admitted in ``admission_year``.

    Feb 2026 for a 2024 admission -> 2, June 2026 -> 3.
    """
    elapsed = as_of.year - admission_year
    if as_of.month >= ACADEMIC_YEAR_START_MONTH:
        elapsed += 1
    return elapsed


def _clamp_year(value: int) -> int:
    return max(MIN_STUDY_YEAR, min(MAX_STUDY_YEAR, value))


def classify(identifier: str, as_of: Optional[date] = None) -> ClassifiedIdentifier:
    as_of = as_of or date.today()
    reg_no = (identifier or "").strip().upper()
    result = ClassifiedIdentifier(identifier=reg_no)

    if not reg_no:
        return replace(result, warning=WARN_REQUIRED)

    year: Optional[int] = None
    if len(reg_no) >= 2:
        prefix = reg_no[0:2]
        if not (prefix.isascii() and prefix.isdigit()):
            return replace(result, warning=WARN_YEAR)
        admission_year = 2000 + int(prefix)
        year = academic_years_elapsed(admission_year, as_of)
        result = replace(result, admission_year=admission_year, calculated_year=_clamp_year(year))

    if len(reg_no) >= 4 and reg_no[2:4] != COLLEGE_CODE:
        return replace(result, warning=WARN_COLLEGE)

    if len(reg_no) >= 6:
        entry_type = ENTRY_CODES.get(reg_no[4:6])
        if entry_type is None:
            return replace(result, warning=WARN_ENTRY)
        result = replace(result, entry_type=entry_type)
        if entry_type is EntryType.LATERAL_ENTRY and year is not None:
            # Lateral entrants join directly into the second year.
            result = replace(result, calculated_year=_clamp_year(year + 1))

    if len(reg_no) >= 7 and reg_no[6] not in VALID_BRANCH_FIRST_DIGITS:
        return replace(result, warning=WARN_BRANCH)

    if len(reg_no) >= 8:
        branch = BRANCH_CODES.get(reg_no[6:8])
        if branch is None:
            return replace(result, warning=WARN_BRANCH)
        result = replace(result, branch=branch, department=DEPARTMENTS[branch])
    else:
        result = replace(result, warning=WARN_INCOMPLETE)

    return result


def branch_for(identifier: str) -> Optional[Branch]:
    return classify(identifier).branch
