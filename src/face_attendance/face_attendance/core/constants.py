"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

LANDMARK_COUNT = 68
DESCRIPTOR_COUNT = 128

# Mean landmark distance that maps to zero similarity.
MAX_LANDMARK_DISTANCE = 100.0

DESCRIPTOR_WEIGHT = 0.7
LANDMARK_WEIGHT = 0.3

MIN_CAPTURE_QUALITY = 0.5
VERIFIED_THRESHOLD = 0.85
UNVERIFIED_THRESHOLD = 0.70
REJECTED_THRESHOLD = 0.50

# Enrollment acceptance for reference vectors.
MIN_ENROLL_QUALITY = 0.3
MIN_ENROLL_FACE_SIZE = 50.0

SIMULATED_DETECTION_RATE = 0.9
SIMULATED_QUALITY_RANGE = (0.6, 1.0)
SIMULATED_LATENCY_RANGE = (1.0, 3.0)

DEFAULT_LOCATION = "Main Office"
DEFAULT_SEED_DAYS = 7
DEFAULT_SEED_RANDOM_SEED = 42

EMPLOYEES_KEY = "employees"
ATTENDANCE_KEY = "attendance"
DEMO_DATA_INITIALIZED_KEY = "demo_data_initialized"
