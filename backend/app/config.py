import os

LOG_STORE = os.getenv("LOG_STORE", "sqlite")
STORE_URL = os.getenv("STORE_URL", "")
STORE_API_KEY = os.getenv("STORE_API_KEY", "")
STORE_TABLE = os.getenv("STORE_TABLE", "workouts")
STORE_TIMEOUT_SECONDS = float(os.getenv("STORE_TIMEOUT_SECONDS", "10"))

# created_at is stored in UTC; month boundaries follow the user's wall clock.
DISPLAY_TIMEZONE = os.getenv("DISPLAY_TIMEZONE", "Asia/Seoul")

NOTIFICATION_SECONDS = float(os.getenv("NOTIFICATION_SECONDS", "2"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
