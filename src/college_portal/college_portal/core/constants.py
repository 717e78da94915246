"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_EDIT_WINDOW_MINUTES = 120
DEFAULT_RECENT_SUBMISSIONS = 10
DEFAULT_ANNOUNCEMENT_LIMIT = 10
DEFAULT_EMAIL_DOMAIN = "aliet.ac.in"
MIN_PASSWORD_LENGTH = 6

# Academic years roll over in June.
ACADEMIC_YEAR_START_MONTH = 6
MIN_STUDY_YEAR = 1
MAX_STUDY_YEAR = 4

COLLEGE_CODE = "HP"

EXAM_MAX_MARKS = 15
ASSIGNMENT_MAX_MARKS = 5
SUBJECT_MAX_MARKS = EXAM_MAX_MARKS + ASSIGNMENT_MAX_MARKS

ALL_SECTIONS = "ALL"
ALL_YEARS = 0
UNKNOWN_BRANCH = "Unknown"
