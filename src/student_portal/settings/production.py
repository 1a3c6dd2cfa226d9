import os

from .base import *  # noqa: F401,F403

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

if SECRET_KEY == "please-set-SECRET_KEY":  # noqa: F405
    raise RuntimeError("SECRET_KEY must be set in production")
