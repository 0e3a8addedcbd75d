import json
import os


def _json_env(key: str, default):
    raw = os.getenv(key)
    return json.loads(raw) if raw else default


# Tất cả thời gian lịch và ngày đồng bộ tính theo múi giờ này
TIME_ZONE = os.getenv("TIME_ZONE", "Asia/Kolkata")

FIRESTORE_CONFIG = {
    "project": os.getenv("GOOGLE_CLOUD_PROJECT"),
    "database": os.getenv("FIRESTORE_DATABASE", "(default)"),
    "emulator_host": os.getenv("FIRESTORE_EMULATOR_HOST"),
}
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID", FIRESTORE_CONFIG["project"])

ATTENDANCE_SPREADSHEET_ID = os.getenv("ATTENDANCE_SPREADSHEET_ID", "")
LEARNING_HOURS_SPREADSHEET_ID = os.getenv("LEARNING_HOURS_SPREADSHEET_ID", "")

# Tên biến môi trường chứa JSON key của service account Google Sheets
SHEETS_SA_KEY_ENV = "SHEETS_SA_KEY"

# {"standups": "Standups"} để chọn tab theo tên; bỏ trống thì theo vị trí tab (0, 1)
ATTENDANCE_TAB_TITLES = _json_env("ATTENDANCE_TAB_TITLES", {})

# {"standups": {"start": "09:00", "days": [0, 1, 2, 3, 4, 5]}, ...}
SESSION_TIMES = _json_env("SESSION_TIMES", {})
