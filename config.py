from __future__ import annotations
import os
from pathlib import Path

class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
    BASE_DIR = Path(__file__).resolve().parent
    # SQLite file in project directory
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", f"sqlite:///{BASE_DIR / 'app.db'}")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JSON_SORT_KEYS = False

    # "database" -> Flask-SQLAlchemy, "memory" -> process-local dicts
    STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "database")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    MAX_WORKLOAD_HOURS = int(os.getenv("MAX_WORKLOAD_HOURS", "60"))
    DASHBOARD_TOP_TEACHERS = 5
    DASHBOARD_TIMELINE_WEEKS = 8

    SEED_DEMO_DATA = False

class DevConfig(BaseConfig):
    DEBUG = True
    SEED_DEMO_DATA = True

class TestConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    STORAGE_BACKEND = "database"
    LOG_LEVEL = "WARNING"

class ProdConfig(BaseConfig):
    DEBUG = False

config_map = {
    "dev": DevConfig,
    "test": TestConfig,
    "prod": ProdConfig,
    "default": DevConfig,
}
