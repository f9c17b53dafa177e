import functools
import logging
import time
from contextlib import contextmanager

from sqlalchemy import create_engine, event, exc
from sqlalchemy.engine import make_url
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import settings
from .errors import StoreUnavailable

logger = logging.getLogger(__name__)

Base = declarative_base()

# Connectivity and time budget failures; anything else is a programming error
STORE_FAILURES = (exc.OperationalError, exc.InterfaceError, exc.TimeoutError)


def create_store_engine(url, timeout=None, **engine_kwargs):
    """Create an engine whose statements fail instead of running past `timeout` seconds."""
    timeout = settings.QUERY_TIMEOUT_SECONDS if timeout is None else timeout
    backend = make_url(url).get_backend_name()
    connect_args = dict(engine_kwargs.pop("connect_args", {}))

    if backend == "sqlite":
        connect_args.setdefault("check_same_thread", False)
        connect_args.setdefault("timeout", timeout)
    else:
        engine_kwargs.setdefault("pool_timeout", timeout)
        engine_kwargs.setdefault("pool_pre_ping", True)
        if backend == "postgresql":
            connect_args.setdefault(
                "options", f"-c statement_timeout={int(timeout * 1000)}"
            )

    engine = create_engine(url, connect_args=connect_args, **engine_kwargs)
    if backend == "sqlite":
        _install_sqlite_hooks(engine, timeout)
    return engine


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


def _disarm(dbapi_conn):
    dbapi_conn.set_progress_handler(None, 0)


def _install_sqlite_hooks(engine, timeout):
    @event.listens_for(engine, "connect")
    def set_sqlite_pragmas(dbapi_conn, _):
        cur = dbapi_conn.cursor()
        cur.execute("PRAGMA foreign_keys=ON;")
        cur.close()
        # the built-in lower() only folds ASCII
        dbapi_conn.create_function("lower", 1, _unicode_lower, deterministic=True)

    @event.listens_for(engine, "before_cursor_execute")
    def arm_deadline(conn, cursor, statement, parameters, context, executemany):
        deadline = [time.monotonic() + timeout]

        def past_deadline():
            # non-zero aborts the running statement with "interrupted";
            # fires once so the rollback that follows is not interrupted too
            if deadline[0] is not None and time.monotonic() > deadline[0]:
                deadline[0] = None
                return 1
            return 0

        conn.connection.dbapi_connection.set_progress_handler(past_deadline, 1000)

    # Rows are stepped out of SQLite while the result is fetched, so the
    # deadline stays armed until the transaction ends, not just the execute.
    @event.listens_for(engine, "commit")
    @event.listens_for(engine, "rollback")
    def disarm_on_transaction_end(conn):
        if not conn.invalidated:
            _disarm(conn.connection.dbapi_connection)

    @event.listens_for(engine, "checkin")
    def disarm_on_checkin(dbapi_conn, _):
        if dbapi_conn is not None:
            _disarm(dbapi_conn)


engine = create_store_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind=None):
    # models must be imported so their tables are registered on Base
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


@contextmanager
def store_errors():
    try:
        yield
    except STORE_FAILURES as e:
        logger.warning("entity store failure: %s", e)
        raise StoreUnavailable(f"Entity store unavailable: {e.__class__.__name__}") from e


def translates_store_errors(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        with store_errors():
            return func(*args, **kwargs)

    return wrapper
