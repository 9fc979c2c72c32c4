"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

DAY_START = time(8, 0)
DAY_END = time(19, 0)
SLOT_MINUTES = 30

TIME_SLOTS = [
    f"{minutes // 60:02d}:{minutes % 60:02d}"
    for minutes in range(DAY_START.hour * 60, DAY_END.hour * 60 + 1, SLOT_MINUTES)
]

DEFAULT_LIST_LIMIT = 200
DEFAULT_NOTIFICATION_LIMIT = 50

ATTENDANCE_GOOD_PERCENT = 75.0
ATTENDANCE_WARNING_PERCENT = 60.0

UNKNOWN_NAME = "Unknown"
UNKNOWN_ROLL_NO = "N/A"
