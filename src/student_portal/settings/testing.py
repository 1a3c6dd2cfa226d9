from .base import *  # noqa: F401,F403

SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
AUTO_SEED_DB = False

GEOFENCE_RADIUS_M = 50.0
UPLOAD_FOLDER = "/tmp/student_portal_test_uploads"
