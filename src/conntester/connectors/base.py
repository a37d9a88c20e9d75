from typing import Any, Dict, Optional
import logging
import time
from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, Connection, Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import NullPool
from ..exceptions import ConnectionError, ProbeTimeoutError, QueryError

logger = logging.getLogger("conntester")

TEST_QUERY = "SELECT 1"

def remaining(deadline: float) -> float:
    """Seconds left until a monotonic `deadline`."""
    return deadline - time.monotonic()

class SQLAlchemyConnector:
    """
    Generic SQLAlchemy Connector used for any dialect SQLAlchemy knows about.
    Dialect subclasses override `_connect_args` to push the probe deadline
    down into the driver.
    """
    def __init__(self, connection_string: str, db_alias: str = "unknown"):
        self.connection_string = connection_string
        self.db_alias = db_alias
        self._engine: Optional[Engine] = None
        self._conn: Optional[Connection] = None

    def _connect_args(self, url: URL, deadline: float) -> Dict[str, Any]:
        return {}

    def _check_deadline(self, deadline: float, stage: str) -> None:
        if remaining(deadline) <= 0:
            raise ProbeTimeoutError(f"{stage} exceeded the probe deadline")

    def connect(self, deadline: float) -> None:
        """
        Builds the engine without touching the network.
        Fails only on local problems: malformed URL, unknown dialect, missing driver.
        """
        if self._engine:
            return
        try:
            url = make_url(self.connection_string)
            # NullPool: every probe measures a fresh connection
            self._engine = create_engine(
                url,
                poolclass=NullPool,
                connect_args=self._connect_args(url, deadline),
            )
        except (SQLAlchemyError, ImportError, ValueError, TypeError) as e:
            raise ConnectionError(f"Failed to create engine: {e}")

    def ping(self, deadline: float) -> None:
        """Opens the connection and runs the dialect's liveness check."""
        self._check_deadline(deadline, "connect")
        if not self._engine:
            raise ConnectionError("Engine not created, call connect() first")

        try:
            self._conn = self._engine.connect()
        except Exception as e:
            # drivers may raise non-DBAPI errors (e.g. TypeError on connect args) unwrapped
            raise ConnectionError(f"Connection failed: {e}")

        try:
            self._engine.dialect.do_ping(self._conn.connection.dbapi_connection)
        except Exception as e:
            # do_ping surfaces raw DBAPI errors, not SQLAlchemy wrappers
            raise ConnectionError(f"Ping failed: {e}")
        self._check_deadline(deadline, "ping")

    def test_query(self, deadline: float) -> None:
        """Runs the diagnostic round trip on the pinged connection."""
        self._check_deadline(deadline, "query")
        if self._conn is None:
            raise QueryError("No open connection, call ping() first")

        try:
            value = self._conn.execute(text(TEST_QUERY)).scalar()
        except SQLAlchemyError as e:
            raise QueryError(f"Test query failed: {e}")

        if value != 1:
            raise QueryError(f"Test query returned {value!r}, expected 1")
        if remaining(deadline) <= 0:
            raise QueryError("Test query exceeded the probe deadline")

    def close(self) -> None:
        if self._conn is not None:
            try:
                self._conn.close()
            except SQLAlchemyError as e:
                logger.debug(f"Error closing connection to {self.db_alias}: {e}")
            self._conn = None
        if self._engine:
            self._engine.dispose()
            self._engine = None
