from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from .config import settings


class Base(DeclarativeBase):
    pass


def configure_sqlite(engine: Engine) -> Engine:
    """Make SQLite enforce foreign keys and honour SAVEPOINTs.

    pysqlite defers BEGIN until the first DML statement, which breaks nested
    transactions, so transaction control is taken over here.
    """
    if engine.dialect.name != "sqlite":
        return engine

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return engine


def make_engine(url: str, **kwargs) -> Engine:
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    return configure_sqlite(create_engine(url, **kwargs))


engine = make_engine(settings.database_url)
SessionLocal = sessionmaker(autoflush=False, bind=engine)


def init_db():
    # register models on Base.metadata
    from . import models  # noqa: F401
    Base.metadata.create_all(bind=engine)
