# medstore/core/config.py
import os
from typing import List
from urllib.parse import quote_plus

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


def _split_csv(value: str) -> List[str]:
    return [v.strip() for v in (value or "").split(",") if v.strip()]


def _mysql_uri() -> str:
    driver = os.getenv("DB_DRIVER", "pymysql")
    user = quote_plus(os.getenv("MYSQL_USER", "medstore"))
    password = quote_plus(os.getenv("MYSQL_PASSWORD", ""))
    host = os.getenv("MYSQL_HOST", "localhost")
    port = os.getenv("MYSQL_PORT", "3306")
    db_name = os.getenv("MYSQL_DB", "medstore")
    auth = f"{user}:{password}" if password else user
    return f"mysql+{driver}://{auth}@{host}:{port}/{db_name}?charset=utf8mb4"


class Settings(BaseModel):
    PROJECT_NAME: str = os.getenv("PROJECT_NAME", "Medstore Inventory")
    API_V1_STR: str = os.getenv("API_V1_STR", "/api")

    # CORS (env takes priority)
    BACKEND_CORS_ORIGINS: List[str] = _split_csv(
        os.getenv(
            "CORS_ORIGINS",
            "http://localhost:5173,http://127.0.0.1:5173",
        ))

    # ---------- Database ----------
    # DATABASE_URL wins; otherwise the MySQL URI is built from MYSQL_*.
    SQLALCHEMY_DATABASE_URI: str = os.getenv("DATABASE_URL") or _mysql_uri()

    # ---------- Security ----------
    JWT_SECRET: str = os.getenv("JWT_SECRET", "change-this")
    JWT_ALG: str = os.getenv("JWT_ALG", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(
        os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "720"))
    REFRESH_TOKEN_EXPIRE_MINUTES: int = int(
        os.getenv("REFRESH_TOKEN_EXPIRE_MINUTES", str(7 * 24 * 60)))

    # ---------- Bootstrap admin ----------
    ADMIN_EMAIL: str = os.getenv("ADMIN_EMAIL", "admin@medstore.in")
    ADMIN_PASSWORD: str = os.getenv("ADMIN_PASSWORD", "")
    ADMIN_NAME: str = os.getenv("ADMIN_NAME", "Administrator")

    # ---------- Inventory ----------
    TIMEZONE: str = os.getenv("TIMEZONE", "Asia/Kolkata")
    DEFAULT_MIN_STOCK: int = int(os.getenv("DEFAULT_MIN_STOCK", "20"))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()
