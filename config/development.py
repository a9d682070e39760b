import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# memory | file | mysql
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "file")
DATA_FILE = os.getenv("DATA_FILE", "data/face_attendance.json")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "face_attendance"),
}

# simulated | demo | face_recognition
FEATURE_EXTRACTOR = os.getenv("FEATURE_EXTRACTOR", "simulated")
CAPTURE_LATENCY = (
    float(os.getenv("CAPTURE_LATENCY_MIN", "1.0")),
    float(os.getenv("CAPTURE_LATENCY_MAX", "3.0")),
)

# Record attendance for medium-confidence (unverified) matches too
ACCEPT_UNVERIFIED = bool(int(os.getenv("ACCEPT_UNVERIFIED", "1")))
DEFAULT_LOCATION = os.getenv("DEFAULT_LOCATION", "Main Office")

# Seed the demo gallery on first read; "none" gives a random week on every reset
AUTO_SEED_DEMO = bool(int(os.getenv("AUTO_SEED_DEMO", "1")))
_seed = os.getenv("SEED_RANDOM_SEED", "42")
SEED_RANDOM_SEED = None if _seed.lower() == "none" else int(_seed)

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_DIR = os.getenv("LOG_DIR", "logs")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
