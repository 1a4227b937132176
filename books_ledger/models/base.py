"""
Database engine, session management, and base model.

Every model inherits from Base. Every request gets a session
from get_db().
"""

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from books_ledger.config import get_settings

settings = get_settings()


def enable_sqlite_savepoints(engine: Engine) -> None:
    """
    Let SQLAlchemy own SQLite transactions.

    pysqlite delays BEGIN until the first write, which breaks
    SAVEPOINT. Turning off its transaction handling and emitting
    BEGIN ourselves makes begin_nested() work as on PostgreSQL.
    """

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")


# --- Engine ---
# pool_pre_ping=True tests connections before using them,
# so a restarted database or a stale connection does not
# fail a posting halfway through a request.
_is_sqlite = settings.DATABASE_URL.startswith("sqlite")
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    connect_args={"check_same_thread": False} if _is_sqlite else {},
)
if _is_sqlite:
    enable_sqlite_savepoints(engine)

# --- Session Factory ---
# autocommit=False: the caller decides when a posting is
# committed, so a voucher and its balance updates land together.
# autoflush=False: SQL is only sent on an explicit flush or commit.
SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    pass


# --- Dependency for FastAPI ---
def get_db():
    """
    Provide a database session for a single request.

    The try/finally pattern ensures the session is always
    closed, even when the endpoint raises.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
