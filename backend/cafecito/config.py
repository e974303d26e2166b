# backend/cafecito/config.py
from __future__ import annotations
import os


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/cafecito.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///cafecito.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Ticket header and sale folio format (e.g. "CF-20260213-0042")
    STORE_NAME = os.environ.get("STORE_NAME", "Cafecito Feliz")
    SALE_ID_PREFIX = os.environ.get("SALE_ID_PREFIX", "CF")
    SALE_ID_SUFFIX_DIGITS = int(os.environ.get("SALE_ID_SUFFIX_DIGITS", "4"))

    # Single front-end origin allowed by CORS
    FRONT_APP_URL = os.environ.get("FRONT_APP_URL", "http://localhost:4200")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
