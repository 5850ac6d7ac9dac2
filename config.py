import os
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name, default="0"):
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "change-this-secret")

    # MongoDB
    MONGO_URI = os.environ.get("MONGO_URI", "mongodb://localhost:27017/HRDesk")

    # Signed assertions (admin_token / token cookies)
    JWT_SECRET = os.environ.get("JWT_SECRET", SECRET_KEY)
    JWT_ALGORITHM = "HS256"
    TOKEN_MAX_AGE = int(os.environ.get("TOKEN_MAX_AGE", 60 * 60 * 24))

    # Admin principal lives outside the employees collection
    ADMIN_USERNAME = os.environ.get("ADMIN_USERNAME")
    ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD")

    COOKIE_SECURE = _env_flag("COOKIE_SECURE", "0")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    JWT_SECRET = "test-jwt-secret"
    MONGO_URI = "mongodb://localhost:27017/HRDeskTest"
    ADMIN_USERNAME = "admin"
    ADMIN_PASSWORD = "admin-pass"
    COOKIE_SECURE = False
    LOG_LEVEL = "DEBUG"
