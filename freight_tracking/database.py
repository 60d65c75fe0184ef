# freight_tracking/database.py
"""
Database connection, session management, and table creation.
Uses SQLAlchemy with PostgreSQL. Only the tables owned by the tracking core
are created here; assignment and warehouse tables belong to other services
and are mapped read-only.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from freight_tracking.config import settings

engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,          # Auto-reconnect if DB connection drops
    pool_size=10,
    max_overflow=20,
    echo=False,                  # Set True to log all SQL queries (debug only)
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency — yields a DB session and closes it after request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def owned_tables():
    """Tables this service creates and writes. Everything else is read-only."""
    from freight_tracking.models.toll_crossing import TollCrossing   # noqa
    from freight_tracking.models.api_call_log import ApiCallLog      # noqa
    from freight_tracking.models.random_search import RandomSearch   # noqa

    return [TollCrossing.__table__, ApiCallLog.__table__, RandomSearch.__table__]


def create_tables(bind=None):
    """Creates the crossing store, call ledger and saved searches. Safe to call multiple times."""
    Base.metadata.create_all(bind=bind or engine, tables=owned_tables())
