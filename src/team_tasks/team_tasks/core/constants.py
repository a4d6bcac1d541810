"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

TOKEN_EXPIRE_DAYS = 7
MANAGER_CODE_PREFIX = "MGR-"
MANAGER_CODE_LENGTH = 8
MANAGER_CODE_ATTEMPTS = 5
MIN_PASSWORD_LENGTH = 6

MAX_UPLOAD_FILES = 5
MAX_UPLOAD_FILE_SIZE = 10 * 1024 * 1024

MAX_HOURS_PER_DAY = 24
DEFAULT_MOOD_RATING = "neutral"
RECENT_ACTIVITY_LIMIT = 10
RECENT_ACTIVITY_PER_KIND = 5

# Unique key names from database/schema.sql
UQ_USERS_EMAIL = "uq_users_email"
UQ_TEAMS_MANAGER_CODE = "uq_teams_manager_code"
UQ_DAILY_WORK_USER_DATE = "uq_daily_work_user_date"
