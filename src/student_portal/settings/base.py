import json
import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "student_portal"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

# All students share one day boundary, whatever their device zone is.
REFERENCE_TIMEZONE = os.getenv("REFERENCE_TIMEZONE", "Asia/Kolkata")

# Geofence (deployment configuration). Keys must match the student's 'branch' field.
GEOFENCE_RADIUS_M = float(os.getenv("GEOFENCE_RADIUS_M", "50"))
GEOLOCATION_TIMEOUT_SECONDS = float(os.getenv("GEOLOCATION_TIMEOUT_SECONDS", "10"))

BRANCH_LOCATIONS = {
    "Bhayandar": {
        "name": "ABS Bhayandar",
        "center": {"lat": 19.41890950317244, "lng": 72.8181867996178},
    },
    "Bhiwandi": {
        "name": "ABS Bhiwandi",
        "center": {"lat": 19.280002916468632, "lng": 73.05493116068932},
    },
}
if os.getenv("BRANCH_LOCATIONS_JSON"):
    BRANCH_LOCATIONS = json.loads(os.environ["BRANCH_LOCATIONS_JSON"])

DEFAULT_CENTER = {
    "name": "ABS Main",
    "center": {"lat": 19.41890950317244, "lng": 72.8181867996178},
}

# Photo storage
UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", "static/uploads")
UPLOAD_URL_PREFIX = os.getenv("UPLOAD_URL_PREFIX", "/uploads")
MAX_CONTENT_LENGTH = 8 * 1024 * 1024

# Help desk
HELP_PHONE_NUMBER = os.getenv("HELP_PHONE_NUMBER", "7400264218")
HELP_COUNTRY_CODE = os.getenv("HELP_COUNTRY_CODE", "91")
HELP_MESSAGE = os.getenv("HELP_MESSAGE", "Hello, I have a query regarding the app.")
