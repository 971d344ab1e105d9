from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from app.core.config import settings


def build_engine(database_url: str, timeout: int = settings.db_timeout, **kwargs):
    """
    Create an engine for the given URL.

    SQLite connections are shared with FastAPI's threadpool, so thread checks
    are disabled and writers wait on the busy timeout instead of failing fast.
    PostgreSQL connections get a statement timeout so no store call blocks
    indefinitely.
    """
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args = {"check_same_thread": False, "timeout": timeout}
    elif database_url.startswith("postgresql"):
        connect_args = {"options": f"-c statement_timeout={timeout * 1000}"}

    return create_engine(database_url, connect_args=connect_args, **kwargs)


engine = build_engine(settings.database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
