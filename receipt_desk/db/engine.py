# receipt_desk/db/engine.py

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

IN_MEMORY_URL = "sqlite://"


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def _register_sqlite_functions(engine: Engine) -> None:
    # SQLite's built-in lower() only folds ASCII letters
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_conn, connection_record):
        dbapi_conn.create_function("lower", 1, _unicode_lower, deterministic=True)


def get_engine(database_url: str = IN_MEMORY_URL) -> Engine:
    # echo=True if you want to see SQL printed in the terminal
    if database_url in (IN_MEMORY_URL, "sqlite:///:memory:"):
        # One shared connection, otherwise every checkout gets an empty database
        engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    elif database_url.startswith("sqlite"):
        engine = create_engine(database_url, connect_args={"check_same_thread": False})
    else:
        return create_engine(database_url)

    _register_sqlite_functions(engine)
    return engine
