from .base import *  # noqa: F401,F403
from .base import db_config

SECRET_KEY = "test-secret"
DB_CONFIG = db_config("shift_ledger_test")

TESTING = True
LOG_LEVEL = "WARNING"

# Tests pin shift rules regardless of the environment
NIGHT_SHIFT_BONUS_MINUTES = 120
BUSY_WINDOW_HOURS = 24
OVERTIME_TICK_SECONDS = 60

AUTO_INIT_DB = False
AUTO_SEED_DB = False
