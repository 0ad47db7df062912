import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./frontdesk.db")

# Redis (notification snapshot cache, pub/sub change feed, arq worker)
REDIS_URL = os.getenv("REDIS_URL")
REDIS_CHANGE_CHANNEL_PREFIX = os.getenv("REDIS_CHANGE_CHANNEL_PREFIX", "frontdesk:changes")

# Commercial schedule: fixed hourly slots and the default cap per slot
COMMERCIAL_HOURS = tuple(
    h.strip()
    for h in os.getenv(
        "COMMERCIAL_HOURS", "09:00,10:00,11:00,12:00,13:00,14:00,15:00,16:00"
    ).split(",")
    if h.strip()
)
DEFAULT_MAX_PER_HOUR = int(os.getenv("DEFAULT_MAX_PER_HOUR", "15"))
# Slots at or above this share of the cap are flagged as "warning"
WARNING_RATIO = float(os.getenv("WARNING_RATIO", "0.8"))

# Reception dashboard covers a wider window than the commercial hours
RECEPTION_FIRST_HOUR = int(os.getenv("RECEPTION_FIRST_HOUR", "8"))
RECEPTION_LAST_HOUR = int(os.getenv("RECEPTION_LAST_HOUR", "20"))

# Check-in QR payload discriminator
CHECKIN_TOKEN_TYPE = os.getenv("CHECKIN_TOKEN_TYPE", "check-in")

# Notification counters
NOTIFICATION_RECONCILE_SECONDS = int(os.getenv("NOTIFICATION_RECONCILE_SECONDS", "300"))
NEW_LEAD_WINDOW_HOURS = int(os.getenv("NEW_LEAD_WINDOW_HOURS", "24"))
NOTIFICATION_CACHE_TTL = int(os.getenv("NOTIFICATION_CACHE_TTL", "600"))
NOTIFICATION_COUNTS_KEY = "notifications:counts"

# Recurring course offerings: one lesson per week for two months
COURSE_WEEKS = int(os.getenv("COURSE_WEEKS", "8"))

# Rooms available for class offerings, with their capacities
ROOMS = {
    "room_1": {"name": "Room 1", "capacity": 50},
    "room_2": {"name": "Room 2", "capacity": 50},
    "room_5": {"name": "Room 5", "capacity": 30},
    "room_6": {"name": "Room 6", "capacity": 20},
}
DEFAULT_ROOM_CAPACITY = 30
