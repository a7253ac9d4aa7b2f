"""
Database engine and session wiring
"""
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from booking_engine.config import settings


def _connect_args(url: str) -> dict:
    # SQLite connections are shared across the request threadpool
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(settings.database_url, connect_args=_connect_args(settings.database_url))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    """FastAPI dependency yielding a database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Create all tables"""
    import booking_engine.models  # noqa: F401  registers models on Base

    Base.metadata.create_all(bind=engine)
