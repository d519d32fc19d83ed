"""Shared application constants.

Centralizes repeat values used by the counter page, the progress
calculation and the session cookie so we can adjust them in one place.
"""

# Weekly goals used when a user has no settings yet (or stored ones are invalid)
DEFAULT_PUSHUPS_GOAL = 100
DEFAULT_RUN_KM_GOAL = 50

# Length of a week window in days: [Monday 00:00 UTC, next Monday 00:00 UTC)
WEEK_DAYS = 7

# Session cookie holding the signed auth token
AUTH_COOKIE_NAME = "pushrun_auth"
SESSION_DAYS = 30

# Minimum password length accepted on registration
MIN_PASSWORD_LENGTH = 8

# Where the app sends people after login / when they are not logged in
COUNTER_PATH = "/app/counter"
LOGIN_PATH = "/login"

# Largest push-up count we store (fits a signed 32-bit INTEGER column)
MAX_PUSHUPS = 2**31 - 1
