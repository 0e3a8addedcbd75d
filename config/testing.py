SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

TIME_ZONE = "Asia/Kolkata"

FIRESTORE_CONFIG = {"project": "nxtprof-test", "database": "(default)", "emulator_host": None}
FIREBASE_PROJECT_ID = "nxtprof-test"

ATTENDANCE_SPREADSHEET_ID = "attendance-sheet"
LEARNING_HOURS_SPREADSHEET_ID = "learning-sheet"
SHEETS_SA_KEY_ENV = "SHEETS_SA_KEY"

ATTENDANCE_TAB_TITLES = {}
SESSION_TIMES = {}
