import os

from .base import *  # noqa: F401,F403
from .base import env_flag

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

AUTO_INIT_DB = env_flag("AUTO_INIT_DB", True)
