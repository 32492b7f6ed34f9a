# garage_sale/database.py

from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker

from garage_sale.core.config import settings


def configure_sqlite(engine):
    """
    SQLite needs two things the other backends give us for free:
    foreign keys switched on per connection, and write transactions that
    take the write lock up front so a compare-and-set UPDATE waits for a
    competing writer instead of failing with "database is locked".
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # let SQLAlchemy emit BEGIN itself
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


def build_engine(url: str):
    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            connect_args={"check_same_thread": False, "timeout": 30},
        )
        return configure_sqlite(engine)

    # Bounded pool; callers queue for up to DB_POOL_TIMEOUT when exhausted
    return create_engine(
        url,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_pre_ping=True,
    )


engine = build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
