from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def make_engine(database_url: str) -> Engine:
    kwargs = {"future": True}
    if database_url.startswith("sqlite"):
        # For SQLite, enable check_same_thread=False for multithreading in FastAPI
        kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # one shared connection, otherwise every session sees an empty database
            kwargs["poolclass"] = StaticPool
    engine = create_engine(database_url, **kwargs)

    # Ensure SQLite enforces foreign keys
    if database_url.startswith("sqlite"):
        @event.listens_for(engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True, expire_on_commit=False)


def create_schema(engine: Engine) -> None:
    # Registers the mapped tables on Base.metadata
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
