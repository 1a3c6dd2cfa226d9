"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
Deployment values (geofence radius, branch centers) live in settings, not here.
"""

DEFAULT_REFERENCE_TIMEZONE = "Asia/Kolkata"
SYNTHETIC_LOGIN_DOMAIN = "abs-login.local"

EARTH_RADIUS_M = 6_371_000.0

DEFAULT_GEOLOCATION_TIMEOUT_SECONDS = 10
DEFAULT_ANNOUNCEMENT_LIMIT = 25
DEFAULT_BRANCH_WINDOW_DAYS = 30
DEFAULT_BANNER_ORDER = 999

PROFILE_CACHE_PREFIX = "student_profile_"

ATTENDANCE_COLLECTION = "studentattendance"
STUDENTS_COLLECTION = "students"
ACCOUNTS_COLLECTION = "accounts"
LECTURES_COLLECTION = "lectures"
RESULTS_COLLECTION = "results"
BANNERS_COLLECTION = "banners"
ANNOUNCEMENTS_COLLECTION = "announcements"
