# backend/purchasing/config.py
from __future__ import annotations
import os


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///purchasing.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Display zone for purchase order datetimes. Storage is always UTC.
    # Read once when the app is built; changing it needs a restart.
    APP_TIMEZONE = os.environ.get("APP_TIMEZONE", "Asia/Jakarta")

    DEFAULT_PAGE_SIZE = 10
    MAX_PAGE_SIZE = 100

    # No authentication yet: every write is attributed to this actor
    DEFAULT_ACTOR = "SYSTEM"

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
