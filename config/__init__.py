import os

SETTINGS_MODULES = {
    "development": "config.development",
    "dev": "config.development",
    "testing": "config.testing",
    "test": "config.testing",
    "production": "config.production",
    "prod": "config.production",
}


def get_settings_module() -> str:
    """Module path for APP_ENV; unknown values fall back to development."""
    env = os.getenv("APP_ENV", "development").strip().lower()
    return SETTINGS_MODULES.get(env, SETTINGS_MODULES["development"])
