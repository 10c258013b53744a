import os


def env_int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


def env_flag(name: str, default: bool) -> bool:
    return bool(int(os.getenv(name, "1" if default else "0")))


def db_config(default_database: str) -> dict:
    return {
        "host": os.getenv("DB_HOST", "localhost"),
        "port": env_int("DB_PORT", 3306),
        "user": os.getenv("DB_USER", "root"),
        "password": os.getenv("DB_PASSWORD", ""),
        "database": os.getenv("DB_NAME", default_database),
    }


SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
DB_CONFIG = db_config("shift_ledger")

DEBUG = False
TESTING = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Shift rules
NIGHT_SHIFT_BONUS_MINUTES = env_int("NIGHT_SHIFT_BONUS_MINUTES", 120)
BUSY_WINDOW_HOURS = env_int("BUSY_WINDOW_HOURS", 24)
OVERTIME_TICK_SECONDS = env_int("OVERTIME_TICK_SECONDS", 60)

# AUTO_INIT_DB applies schema.sql on startup (CREATE IF NOT EXISTS)
AUTO_INIT_DB = env_flag("AUTO_INIT_DB", False)
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", False)
