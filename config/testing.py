import os

SECRET_KEY = "test-secret"

STORAGE_BACKEND = "file"
DATA_DIR = os.getenv("DATA_DIR", "test-data")
STORAGE_KEY = "facial-attendance-records"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "face_attendance_test"),
}

DEBOUNCE_SECONDS = 30
MIN_MATCH_CONFIDENCE = 0.4

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
