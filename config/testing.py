import os

SECRET_KEY = "test-secret"

STORAGE_BACKEND = "memory"
DATA_FILE = os.getenv("DATA_FILE", "")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "face_attendance_test"),
}

FEATURE_EXTRACTOR = "demo"
CAPTURE_LATENCY = (0.0, 0.0)

ACCEPT_UNVERIFIED = True
DEFAULT_LOCATION = "Main Office"

AUTO_SEED_DEMO = True
SEED_RANDOM_SEED = 42

DEBUG = False
TESTING = True
AUTO_INIT_DB = False
LOG_LEVEL = "WARNING"
LOG_DIR = None
