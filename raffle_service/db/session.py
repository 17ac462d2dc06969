from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from raffle_service.core.config import settings

SQLITE_BUSY_TIMEOUT_MS = 5000


def make_engine(database_url: str, **kw):
    """
    Build an engine for the given URL.

    SQLite has no row locks, so every transaction opens with BEGIN IMMEDIATE
    to take the database write lock up front; concurrent writers then queue
    on the busy timeout instead of failing mid-transaction.
    """
    if database_url.startswith("sqlite"):
        kw.setdefault("connect_args", {"check_same_thread": False})
    else:
        kw.setdefault("pool_pre_ping", True)

    engine = create_engine(database_url, **kw)

    if engine.dialect.name == "sqlite":
        @event.listens_for(engine, "connect")
        def _sqlite_connect(dbapi_connection, _):
            # hand transaction control to SQLAlchemy's "begin" event below
            dbapi_connection.isolation_level = None
            cur = dbapi_connection.cursor()
            cur.execute(f"PRAGMA busy_timeout={SQLITE_BUSY_TIMEOUT_MS};")
            cur.execute("PRAGMA foreign_keys=ON;")
            cur.close()

        @event.listens_for(engine, "begin")
        def _sqlite_begin(conn):
            conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


# The engine is the entry point to the database and owns the connection pool.
engine = make_engine(settings.DATABASE_URL)

# One Session per request; the purchase and state-machine services open
# their own transactions on it.
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        # Always release the connection, even if the endpoint raised.
        db.close()
