from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for access control."""

    ADMIN = "admin"
    HOD = "hod"
    FACULTY = "faculty"
    STUDENT = "student"


class Branch(str, Enum):
    """Academic departments, keyed by the two-digit code in registration numbers."""

    CIVIL = "CIVIL"
    EEE = "EEE"
    MECH = "MECH"
    ECE = "ECE"
    CSE = "CSE"
    IT = "IT"
    CSM = "CSM"
    CSD = "CSD"


class EntryType(str, Enum):
    REGULAR = "Regular"
    LATERAL_ENTRY = "Lateral Entry"


class MarkStatus(str, Enum):
    """Explicit per-student mark stored for a session."""

    PRESENT = "Present"
    ABSENT = "Absent"


class EditWindowState(str, Enum):
    EDITABLE = "EDITABLE"
    LOCKED = "LOCKED"


class ExamType(str, Enum):
    MID_1 = "Mid-1"
    MID_2 = "Mid-2"
    SEMESTER = "Semester"


class AnnouncementTier(str, Enum):
    INSTITUTIONAL = "institutional"
    DEPARTMENTAL = "departmental"
    GENERAL = "general"


class AnnouncementAudience(str, Enum):
    ALL = "all"
    STUDENT = "student"
    FACULTY = "faculty"
    HOD = "hod"
