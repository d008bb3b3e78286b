"""Environment driven settings for connecting to the shop database."""

import os
from dotenv import load_dotenv

# Load environment
load_dotenv(".env")

DEFAULT_DATA_DIR = "/app/data/"


def get_database_url() -> str:
    """Return DATABASE_URL, or a PostgreSQL URL assembled from POSTGRES_* variables."""
    database_url = os.getenv("DATABASE_URL")
    if database_url:
        return database_url

    db_user = os.getenv("POSTGRES_USER", "postgres")
    db_password = os.getenv("POSTGRES_PASSWORD", "postgres")
    db_host = os.getenv("POSTGRES_HOST", "postgres")
    db_port = os.getenv("POSTGRES_PORT", "5432")
    db_name = os.getenv("POSTGRES_DB", "auto_parts_shop")

    return f"postgresql://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}"


def get_data_dir() -> str:
    return os.getenv("DATA_DIR", DEFAULT_DATA_DIR)


def get_flag(name: str, default: bool = False) -> bool:
    """Read a boolean environment flag ("1", "true", "yes", "on")."""
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def get_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return int(value)
