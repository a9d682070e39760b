import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "mysql")
DATA_FILE = os.getenv("DATA_FILE", "/var/lib/face_attendance/data.json")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "face_attendance"),
}

# "face_recognition" needs the vision extra: pip install .[vision]
FEATURE_EXTRACTOR = os.getenv("FEATURE_EXTRACTOR", "simulated")
CAPTURE_LATENCY = (0.0, 0.0)

ACCEPT_UNVERIFIED = bool(int(os.getenv("ACCEPT_UNVERIFIED", "0")))
DEFAULT_LOCATION = os.getenv("DEFAULT_LOCATION", "Main Office")

AUTO_SEED_DEMO = bool(int(os.getenv("AUTO_SEED_DEMO", "0")))
_seed = os.getenv("SEED_RANDOM_SEED", "42")
SEED_RANDOM_SEED = None if _seed.lower() == "none" else int(_seed)

# If enabled, the kv_store table is created on startup (idempotent)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_DIR = os.getenv("LOG_DIR", "logs")
