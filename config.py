from __future__ import annotations
import os
from pathlib import Path

from dotenv import load_dotenv

# .env в корне проекта (MAPBOX_TOKEN, DATABASE_URL и т.п.)
load_dotenv()

class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
    BASE_DIR = Path(__file__).resolve().parent
    # SQLite file in project directory
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", f"sqlite:///{BASE_DIR / 'app.db'}")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JSON_SORT_KEYS = False

    # внешние провайдеры
    MAPBOX_TOKEN = os.getenv("MAPBOX_TOKEN", "")
    DIRECTIONS_BASE_URL = os.getenv("DIRECTIONS_BASE_URL", "https://api.mapbox.com/directions/v5/mapbox")
    DIRECTIONS_PROFILE = os.getenv("DIRECTIONS_PROFILE", "walking")
    GEOCODER_URL = os.getenv("GEOCODER_URL", "https://nominatim.openstreetmap.org/search")
    GEOCODER_USER_AGENT = os.getenv("GEOCODER_USER_AGENT", "campus-navigator/0.1")
    PROVIDER_TIMEOUT = float(os.getenv("PROVIDER_TIMEOUT", "5"))

    PROXIMITY_THRESHOLD_M = float(os.getenv("PROXIMITY_THRESHOLD_M", "10"))
    # пустую БД наполняем тем же списком, что и фолбэк
    SEED_CLASSROOMS = True
    # без миграций создаём таблицы сами (dev/тесты)
    AUTO_CREATE_TABLES = True

class DevConfig(BaseConfig):
    DEBUG = True

class TestConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_ENGINE_OPTIONS = {"connect_args": {"check_same_thread": False}}
    MAPBOX_TOKEN = "test-token"

class ProdConfig(BaseConfig):
    DEBUG = False
    AUTO_CREATE_TABLES = False
    SEED_CLASSROOMS = os.getenv("SEED_CLASSROOMS", "1") == "1"

config_map = {
    "dev": DevConfig,
    "test": TestConfig,
    "prod": ProdConfig,
    "default": DevConfig,
}
