import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "participant_test_db"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False

ABSENCE_THRESHOLD = 3
BAN_DURATION_MONTHS = 6

RESEND_API_KEY = ""
MAIL_FROM = "test@example.org"
MAIL_API_URL = "https://api.resend.com/emails"
