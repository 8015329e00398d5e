import os
from pathlib import Path
from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

# Force-load .env (Windows-safe, reload-safe)
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH)

DB_TIMEOUT_SECONDS = 3

DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    raise RuntimeError("DATABASE_URL is not set. Check your .env file.")


def _connect_args(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"check_same_thread": False, "timeout": DB_TIMEOUT_SECONDS}
    if url.startswith("mysql"):
        return {
            "connect_timeout": DB_TIMEOUT_SECONDS,
            "read_timeout": DB_TIMEOUT_SECONDS,
            "write_timeout": DB_TIMEOUT_SECONDS,
        }
    if url.startswith("postgresql"):
        return {
            "connect_timeout": DB_TIMEOUT_SECONDS,
            "options": f"-c statement_timeout={DB_TIMEOUT_SECONDS * 1000}",
        }
    return {}


def make_engine(url: str):
    options = {"connect_args": _connect_args(url)}
    if not url.startswith("sqlite"):
        options["pool_timeout"] = DB_TIMEOUT_SECONDS
        options["pool_pre_ping"] = True
    return create_engine(url, **options)


engine = make_engine(DATABASE_URL)

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
Base = declarative_base()
