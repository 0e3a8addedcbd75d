"""Constants and defaults.

Note: Keep constants here to avoid magic strings spread across code.
"""

from .enums import SessionType

DEFAULT_TIME_ZONE = "Asia/Kolkata"
SYSTEM_SCHEDULER = "System Automation"
NO_REASON_PROVIDED = "No reason provided"

EMPLOYEES_COLLECTION = "employees"
LEARNING_POINTS_COLLECTION = "learning_points"

SESSION_COLLECTIONS = {
    SessionType.STANDUPS: "standups",
    SessionType.LEARNING_HOURS: "learning_hours",
}

ATTENDANCE_COLLECTIONS = {
    SessionType.STANDUPS: "attendance",
    SessionType.LEARNING_HOURS: "learning_hours_attendance",
}

# Field holding the session date on attendance documents.
ATTENDANCE_SESSION_FIELDS = {
    SessionType.STANDUPS: "standup_id",
    SessionType.LEARNING_HOURS: "learning_hour_id",
}

# Positional tab convention of the attendance workbook.
ATTENDANCE_TAB_INDEX = {
    SessionType.STANDUPS: 0,
    SessionType.LEARNING_HOURS: 1,
}

ATTENDANCE_SHEET_COLUMNS = "A:H"
LEARNING_POINTS_SHEET_COLUMNS = "A:J"

SHEETS_SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
