"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

SLOTS = (1, 2, 3)
SINGLE_SLOT = (1,)

BUSY_WINDOW_HOURS = 24
OVERTIME_BUFFER_MINUTES = 15
OVERTIME_TICK_SECONDS = 60
DEFAULT_NIGHT_SHIFT_BONUS_MINUTES = 120

UNKNOWN_EQUIPMENT = "unknown"
DEFAULT_WORK_LABEL = "Work"

DEFAULT_REPORT_DAYS = 7
ABSENCE_LEADERS_LIMIT = 3
