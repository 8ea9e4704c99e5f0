# backend/database.py
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from dotenv import load_dotenv

from config import settings

load_dotenv()


def normalize_database_url(url: str) -> str:
    # Heroku/Azure style URLs use postgres://, SQLAlchemy wants postgresql://
    if url and url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


def build_engine(url: str, **kwargs):
    url = normalize_database_url(url)
    if "sqlite" in url:
        connect_args = {"check_same_thread": False} # Only for SQLite
    else:
        connect_args = {}
    return create_engine(url, connect_args=connect_args, **kwargs)


SQLALCHEMY_DATABASE_URL = normalize_database_url(settings.DATABASE_URL)

engine = build_engine(SQLALCHEMY_DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def init_db(bind=None):
    # Make sure every model is registered on Base.metadata before creating tables
    import models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
